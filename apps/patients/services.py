from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Iterable, Optional, Sequence, Tuple, Union

from apps.rbac.permissions import visible_actions

from .actions import ActionDescriptor

logger = logging.getLogger(__name__)

HOSPITAL_NUMBER = "HospitalNumber"

# Age shown when the collaborator has no date of birth on file.
AGE_UNKNOWN = 0


# ---- Age --------------------------------------------------------------------

def parse_iso_date(value) -> date:
    """
    ISO date (or datetime) string → date. Malformed input raises ValueError;
    callers are expected to screen out missing values first.
    """
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def calculate_age(dob, today: Optional[date] = None) -> str:
    """
    Human readable age from a date of birth.

      - whole years, one less if this year's birthday is still ahead;
      - under a year: full months elapsed, "Less than a month" for zero;
      - "1 year" / "N years" otherwise.
    """
    today = today or date.today()
    birth = parse_iso_date(dob)

    years = today.year - birth.year
    if (today.month, today.day) < (birth.month, birth.day):
        years -= 1

    if years == 0:
        months = (today.year - birth.year) * 12 + today.month - birth.month
        if today.day < birth.day:
            months -= 1
        return "Less than a month" if months == 0 else f"{months} month(s)"

    return "1 year" if years == 1 else f"{years} years"


def _dob_missing(value) -> bool:
    return value is None or value == "" or value == 0


def age_for(dob, today: Optional[date] = None) -> Union[str, int]:
    return AGE_UNKNOWN if _dob_missing(dob) else calculate_age(dob, today=today)


# ---- Row shaping ------------------------------------------------------------

def display_name(*parts: Optional[str]) -> str:
    return ", ".join(p for p in parts if p)


def hospital_number(identifiers: Iterable[dict]) -> str:
    # A missing list is a collaborator contract violation and raises.
    for entry in identifiers:
        if entry.get("type") == HOSPITAL_NUMBER:
            return entry.get("value", "")
    return ""


def normalize_sex(value: Optional[str]) -> str:
    text = value or ""
    return text[:1].upper() + text[1:].lower()


def first_city(address) -> Optional[str]:
    entries = (address or {}).get("address") or []
    return entries[0].get("city") if entries else None


@dataclass(frozen=True)
class DisplayRow:
    patient_id: str
    name: str
    hospital_number: str
    sex: str
    date_of_birth: Any
    age: Union[str, int]
    actions: Tuple[ActionDescriptor, ...] = ()
    city: Optional[str] = None

    @property
    def delete_action(self) -> Optional[ActionDescriptor]:
        return next((a for a in self.actions if a.is_delete), None)


CandidateBuilder = Callable[[dict], Sequence[ActionDescriptor]]


def map_row(
    record: dict,
    permissions: Iterable[str],
    candidates: CandidateBuilder,
    today: Optional[date] = None,
) -> DisplayRow:
    """Shape one collaborator PatientRecord into a table row."""
    dob = record.get("dateOfBirth")
    return DisplayRow(
        patient_id=str(record.get("id") or ""),
        name=display_name(record.get("firstName"), record.get("otherName"), record.get("surname")),
        hospital_number=hospital_number(record["identifier"]["identifier"]),
        sex=normalize_sex(record.get("sex")),
        date_of_birth=dob,
        age=age_for(dob, today=today),
        actions=tuple(visible_actions(candidates(record), permissions)),
        city=first_city(record.get("address")),
    )


# ---- Remote paging ----------------------------------------------------------

@dataclass(frozen=True)
class PageQuery:
    page_size: int
    page_index: int = 0
    search_text: str = ""


@dataclass(frozen=True)
class PageResult:
    rows: Tuple[DisplayRow, ...] = field(default_factory=tuple)
    page: int = 0
    total_count: int = 0
    page_size: int = 0

    @classmethod
    def empty(cls, page_size: int = 0) -> "PageResult":
        return cls(rows=(), page=0, total_count=0, page_size=page_size)

    @property
    def page_count(self) -> int:
        if not self.page_size:
            return 0
        return -(-self.total_count // self.page_size)

    @property
    def has_previous(self) -> bool:
        return self.page > 0

    @property
    def has_next(self) -> bool:
        return (self.page + 1) * self.page_size < self.total_count

    @property
    def first_row(self) -> int:
        return self.page * self.page_size + 1 if self.rows else 0

    @property
    def last_row(self) -> int:
        return self.page * self.page_size + len(self.rows)


Fetch = Callable[[int, int, str], Any]
RowBuilder = Callable[[dict], DisplayRow]


def load_page(fetch: Fetch, query: PageQuery, build_row: RowBuilder) -> PageResult:
    """
    One read against the collaborator, shaped into a PageResult.

    - empty body → empty page (page 0, total 0);
    - {records, totalRecords} → rows mapped in order, total preserved;
    - bare list (Pageable endpoints) → total derived so a full page keeps
      the next page reachable;
    - the requested page index is echoed, never the server's.
    Transport errors and malformed records propagate.
    """
    body = fetch(query.page_size, query.page_index, query.search_text)
    if body is None or body == "":
        logger.debug("Empty body for page %s; rendering an empty table", query.page_index)
        return PageResult.empty(page_size=query.page_size)

    if isinstance(body, list):
        records = body
        total = query.page_index * query.page_size + len(records)
        if len(records) >= query.page_size:
            total += 1
    else:
        records = body["records"]
        total = int(body.get("totalRecords") or 0)

    if len(records) > query.page_size:
        logger.warning(
            "Collaborator returned %d records for a page of %d; truncating",
            len(records), query.page_size,
        )
        records = records[: query.page_size]

    rows = tuple(build_row(r) for r in records)
    return PageResult(rows=rows, page=query.page_index, total_count=total, page_size=query.page_size)
