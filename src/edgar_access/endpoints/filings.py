"""Filing submissions, archive directory listings, and filing documents."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from pydantic import ValidationError

from edgar_access.core.exceptions import NotFoundError, ParsingError
from edgar_access.core.models import CIK, AccessionNumber, FilingRecord, pad_cik
from edgar_access.endpoints.base import BaseEndpoints, join_url

logger = logging.getLogger(__name__)

# Column names in filings.recent, keyed by FilingRecord field.
_RECENT_COLUMNS = {
    "accession_number": "accessionNumber",
    "filing_date": "filingDate",
    "form": "form",
    "report_date": "reportDate",
    "acceptance_date_time": "acceptanceDateTime",
    "act": "act",
    "file_number": "fileNumber",
    "film_number": "filmNumber",
    "items": "items",
    "size": "size",
    "is_xbrl": "isXBRL",
    "is_inline_xbrl": "isInlineXBRL",
    "primary_document": "primaryDocument",
    "primary_doc_description": "primaryDocDescription",
}

AMENDMENT_SUFFIX = "/A"


def _archive_cik(cik: CIK) -> str:
    """Archive paths use the CIK without leading zeros."""
    return str(int(pad_cik(cik)))


def _accession_folder(accession: AccessionNumber) -> str:
    return accession.strip().replace("-", "")


def recent_records(submission: dict[str, Any]) -> list[FilingRecord]:
    """Turn the column-oriented `filings.recent` block into one record per filing.

    Rows that do not validate (missing accession number, bad date, ...) are
    skipped.
    """
    recent = submission.get("filings", {}).get("recent", {})
    accessions = recent.get("accessionNumber", [])

    records: list[FilingRecord] = []
    for idx in range(len(accessions)):
        row = {}
        for field, key in _RECENT_COLUMNS.items():
            column = recent.get(key, [])
            if idx < len(column):
                row[field] = column[idx]
        try:
            records.append(FilingRecord(**row))
        except ValidationError as e:
            logger.debug("Skipping filing row %d: %s", idx, e)
    return records


def expand_form_types(form_types: Iterable[str], include_amendments: bool = True) -> set[str]:
    """Form types to match, plus their `/A` amendments when requested.

    >>> sorted(expand_form_types(["10-K"]))
    ['10-K', '10-K/A']
    """
    expanded = {ft.strip() for ft in form_types}
    if include_amendments:
        expanded |= {f"{ft}{AMENDMENT_SUFFIX}" for ft in expanded if not ft.endswith(AMENDMENT_SUFFIX)}
    return expanded


class FilingEndpoints(BaseEndpoints):
    """Submissions JSON and documents under {archives}/data/{cik}/{accession}/."""

    async def submissions(self, cik: CIK) -> dict[str, Any]:
        """Company submission history: metadata plus the most recent filings."""
        url = join_url(self._client.data_url, f"submissions/CIK{pad_cik(cik)}.json")
        return await self._fetch_json(url)

    async def submissions_page(self, name: str) -> dict[str, Any]:
        """An overflow page listed under filings.files, e.g. CIK0000320193-submissions-001.json."""
        url = join_url(self._client.data_url, "submissions", name)
        return await self._fetch_json(url)

    # --- Filing Selection ---

    async def recent_filings(self, cik: CIK) -> list[FilingRecord]:
        """The company's recent filings, newest first, as SEC orders them."""
        return recent_records(await self.submissions(cik))

    async def filings(
        self,
        cik: CIK,
        *,
        form_types: Iterable[str] | None = None,
        include_amendments: bool = True,
        offset: int | None = None,
        limit: int | None = None,
    ) -> list[FilingRecord]:
        """Recent filings filtered by form type, then sliced by offset/limit.

        Args:
            cik: Company CIK.
            form_types: Forms to keep, e.g. ["10-K", "10-Q"]. None keeps all.
            include_amendments: Also keep the `/A` amendment of each form type.
            offset: Number of matching filings to skip.
            limit: Maximum number of filings to return.
        """
        records = await self.recent_filings(cik)

        if form_types is not None:
            wanted = expand_form_types(form_types, include_amendments)
            records = [r for r in records if r.form in wanted]
        if offset is not None:
            records = records[offset:]
        if limit is not None:
            records = records[:limit]
        return records

    async def latest_filing_content(self, cik: CIK, form_type: str) -> str:
        """Primary document of the newest filing of `form_type` (amendments included).

        Raises:
            NotFoundError: The company has no recent filing of that type.
            ParsingError: The filing lists no primary document.
        """
        matches = await self.filings(cik, form_types=[form_type], limit=1)
        if not matches:
            raise NotFoundError(
                f"No {form_type} filing found for CIK {cik}",
                context={"cik": str(cik), "form_type": form_type},
            )
        filing = matches[0]
        if filing.primary_document is None:
            raise ParsingError(
                f"No primary document listed for filing {filing.accession_number}",
                context={"reason": "primaryDocument missing", "accession": filing.accession_number},
            )
        return await self.filing_content(cik, filing.accession_number, filing.primary_document)

    async def filing_content_by_id(self, cik: CIK, filing_id: str) -> str:
        """Fetch a document by an `accession_number:filename` id.

        Raises:
            ValueError: `filing_id` is not of the form "accession:filename".
        """
        accession, sep, filename = filing_id.partition(":")
        if not sep or not accession or not filename or ":" in filename:
            raise ValueError(
                f"Invalid filing ID {filing_id!r}; expected 'accession_number:filename'"
            )
        return await self.filing_content(cik, accession, filename)

    async def text_filing_links(self, cik: CIK, **filters: Any) -> list[tuple[FilingRecord, str, str]]:
        """(filing, complete submission .txt URL, -index.html URL) for each selected filing.

        `filters` are the keyword arguments of `filings()`.
        """
        return [
            (r, self.text_filing_url(cik, r.accession_number), self.filing_index_url(cik, r.accession_number))
            for r in await self.filings(cik, **filters)
        ]

    async def sgml_header_links(self, cik: CIK, **filters: Any) -> list[tuple[FilingRecord, str, str]]:
        """(filing, .hdr.sgml URL, -index.html URL) for each selected filing."""
        return [
            (r, self.sgml_header_url(cik, r.accession_number), self.filing_index_url(cik, r.accession_number))
            for r in await self.filings(cik, **filters)
        ]

    # --- Archive ---

    async def filing_directory(self, cik: CIK, accession: AccessionNumber) -> dict[str, Any]:
        """index.json listing of the files in one filing."""
        url = self._filing_url(cik, accession, "index.json")
        return await self._fetch_json(url)

    async def entity_directory(self, cik: CIK) -> dict[str, Any]:
        """index.json listing of all filing folders for one company."""
        url = join_url(self._client.archives_url, "data", _archive_cik(cik), "index.json")
        return await self._fetch_json(url)

    async def filing_content(self, cik: CIK, accession: AccessionNumber, filename: str) -> str:
        """One document from a filing, as text (HTML, XML, plain text)."""
        return await self._client.fetch_text(self._filing_url(cik, accession, filename))

    async def filing_document_bytes(
        self, cik: CIK, accession: AccessionNumber, filename: str
    ) -> bytes:
        """One document from a filing, untouched (PDFs, images, zip archives)."""
        return await self._client.fetch_bytes(self._filing_url(cik, accession, filename))

    async def text_filing(self, cik: CIK, accession: AccessionNumber) -> str:
        """The complete submission text file, {accession}.txt."""
        return await self._client.fetch_text(self.text_filing_url(cik, accession))

    async def sgml_header(self, cik: CIK, accession: AccessionNumber) -> str:
        """The SGML header file, {accession}.hdr.sgml."""
        return await self._client.fetch_text(self.sgml_header_url(cik, accession))

    def text_filing_url(self, cik: CIK, accession: AccessionNumber) -> str:
        return self._filing_url(cik, accession, f"{accession.strip()}.txt")

    def sgml_header_url(self, cik: CIK, accession: AccessionNumber) -> str:
        return self._filing_url(cik, accession, f"{accession.strip()}.hdr.sgml")

    def filing_index_url(self, cik: CIK, accession: AccessionNumber) -> str:
        """URL of the human-readable {accession}-index.html page."""
        return self._filing_url(cik, accession, f"{accession.strip()}-index.html")

    def _filing_url(self, cik: CIK, accession: AccessionNumber, filename: str) -> str:
        return join_url(
            self._client.archives_url,
            "data",
            _archive_cik(cik),
            _accession_folder(accession),
            filename,
        )
