from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Optional, Dict, Any, FrozenSet
from datetime import date, datetime
import logging

logger = logging.getLogger(__name__)

# --------- Source tags ---------

SOURCE_BIS = "DOB BIS"
SOURCE_DOB_NOW = "DOB NOW Build"

# the sync job stores the short forms
LEGACY_SOURCES = frozenset({SOURCE_BIS, "BIS"})

def is_legacy_source(source: Optional[str]) -> bool:
    return source in LEGACY_SOURCES

# --------- Core dataclasses ---------

@dataclass(frozen=True)
class ApplicationRecord:
    id: str
    application_number: str
    source: str
    status: Optional[str] = None
    filing_date: Optional[date] = None
    approval_date: Optional[date] = None
    expiration_date: Optional[date] = None
    agency: str = "DOB"
    application_type: Optional[str] = None
    work_type: Optional[str] = None
    description: Optional[str] = None
    applicant_name: Optional[str] = None
    owner_name: Optional[str] = None
    estimated_cost: Optional[float] = None
    raw_data: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

@dataclass(frozen=True)
class FilingNumber:
    prefix: str
    suffix: Optional[str] = None

    @property
    def standalone(self) -> bool:
        return self.suffix is None

@dataclass(frozen=True)
class FilterState:
    """
    Session-owned view state for an applications table.

    `statuses` holds decoded status labels; an empty set matches every status.
    `expanded` holds record ids whose nested related filings are open.
    """
    search: str = ""
    agency: str = "all"
    statuses: FrozenSet[str] = frozenset()
    expanded: FrozenSet[str] = frozenset()

    def toggle_status(self, status: str) -> "FilterState":
        return replace(self, statuses=self.statuses ^ {status})

    def toggle_expanded(self, record_id: str) -> "FilterState":
        return replace(self, expanded=self.expanded ^ {record_id})

    def select_all_statuses(self, statuses) -> "FilterState":
        return replace(self, statuses=frozenset(statuses))

    def clear_statuses(self) -> "FilterState":
        return replace(self, statuses=frozenset())

# --------- Low-level helpers (used by db/cli) ---------

def parse_record_date(value) -> Optional[date]:
    """Accepts date/datetime, ISO strings and NYC Open Data YYYYMMDD strings."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    s = str(value).strip()
    if not s:
        return None
    if len(s) == 8 and s.isdigit():
        s = f"{s[:4]}-{s[4:6]}-{s[6:]}"
    try:
        return date.fromisoformat(s[:10])
    except ValueError:
        logger.debug("unparseable record date %r", value)
        return None

def format_short_date(d: Optional[date]) -> str:
    return "—" if d is None else d.strftime("%m/%d/%y")
