# apps/patients/tables.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Sequence

from django.conf import settings

from .actions import biometrics_actions, listing_actions
from .client import PatientApiClient
from .services import (
    CandidateBuilder,
    DisplayRow,
    Fetch,
    PageQuery,
    PageResult,
    load_page,
    map_row,
)

WITH_BIOMETRICS = "with"
WITHOUT_BIOMETRICS = "without"
BIOMETRIC_STATUSES = (WITH_BIOMETRICS, WITHOUT_BIOMETRICS)


def _to_int(value, default: int, *, min_value: int = 0, max_value: int | None = None) -> int:
    try:
        i = int(value)
    except (TypeError, ValueError):
        return default
    if i < min_value:
        return default
    if max_value is not None and i > max_value:
        i = max_value
    return i


def page_query_from(params) -> PageQuery:
    """
    Read page/size/q from a QueryDict (or any mapping). Unknown page sizes
    fall back to the default one.
    """
    sizes: Sequence[int] = getattr(settings, "PATIENT_PAGE_SIZES", [10, 20, 100])
    default_size = getattr(settings, "PATIENT_DEFAULT_PAGE_SIZE", sizes[0])
    size = _to_int(params.get("size"), default_size, min_value=1)
    if size not in sizes:
        size = default_size
    return PageQuery(
        page_size=size,
        page_index=_to_int(params.get("page"), 0),
        search_text=(params.get("q") or "").strip(),
    )


@dataclass
class PatientTable:
    """
    The remote-paging contract a screen registers with its table: the table
    calls on_page_request(page_index, page_size, search_text) whenever it
    needs rows (first render, page change, size change, search change).
    """

    fetch: Fetch
    candidates: CandidateBuilder
    permissions: FrozenSet[str] = field(default_factory=frozenset)
    searchable: bool = True

    def build_row(self, record: dict) -> DisplayRow:
        return map_row(record, self.permissions, self.candidates)

    def on_page_request(self, page_index: int, page_size: int, search_text: str = "") -> PageResult:
        query = PageQuery(
            page_size=page_size,
            page_index=page_index,
            search_text=search_text if self.searchable else "",
        )
        return load_page(self.fetch, query, self.build_row)

    def load(self, query: PageQuery) -> PageResult:
        return self.on_page_request(query.page_index, query.page_size, query.search_text)


def patient_table(client: PatientApiClient, permissions) -> PatientTable:
    return PatientTable(client.list_patients, listing_actions, frozenset(permissions))


def biometrics_table(client: PatientApiClient, permissions, status: str = WITH_BIOMETRICS) -> PatientTable:
    if status == WITHOUT_BIOMETRICS:
        return PatientTable(
            client.list_patients_without_biometrics,
            biometrics_actions,
            frozenset(permissions),
            searchable=False,
        )
    return PatientTable(client.list_patients_with_biometrics, biometrics_actions, frozenset(permissions))
