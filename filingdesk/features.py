# ============================================================
# Applications table: filtering, primary-row selection, summaries
# Pure functions over ApplicationRecord lists; callers own FilterState
# ============================================================

from dataclasses import dataclass, field
from typing import Iterable, Dict, List, Optional, Tuple
import logging

from .models import ApplicationRecord, FilterState, is_legacy_source, format_short_date
from .status import (
    decode_status, status_style_bucket, is_completed_status, describe_status_code
)
from .families import parse_filing_number, is_initial_suffix, group_families

logger = logging.getLogger(__name__)

DOB_NOW_JOB_URL = "https://a810-dobnow.nyc.gov/Publish/#!/job/{number}"
BIS_JOB_URL = "https://a810-bisweb.nyc.gov/bisweb/JobsQueryByNumberServlet?passjobnumber={number}"


# ------------------------------------------------------------
# 1) Record-level helpers (badges, predicates)
# ------------------------------------------------------------

def decoded_status(app: ApplicationRecord) -> str:
    return decode_status(app.status, app.source)

def status_style(app: ApplicationRecord) -> str:
    return status_style_bucket(decoded_status(app))

def is_completed(app: ApplicationRecord) -> bool:
    return is_completed_status(decoded_status(app))

def is_active(app: ApplicationRecord) -> bool:
    """Active = decoded status matches none of the completed keywords"""
    return not is_completed(app)

def application_url(app: ApplicationRecord) -> str:
    """Public agency page for the filing"""
    template = BIS_JOB_URL if is_legacy_source(app.source) else DOB_NOW_JOB_URL
    return template.format(number=app.application_number)


# ------------------------------------------------------------
# 2) Filter options and default state
# ------------------------------------------------------------

def available_agencies(apps: Iterable[ApplicationRecord]) -> List[str]:
    return sorted({a.agency for a in apps if a.agency})

def available_statuses(apps: Iterable[ApplicationRecord]) -> List[str]:
    return sorted({decoded_status(a) for a in apps})

def default_status_selection(apps: Iterable[ApplicationRecord]) -> frozenset:
    """Every status present except the completed ones"""
    return frozenset(s for s in available_statuses(apps) if not is_completed_status(s))

def default_filter_state(apps: Iterable[ApplicationRecord]) -> FilterState:
    return FilterState(statuses=default_status_selection(apps))

def _matches_search(app: ApplicationRecord, q: str) -> bool:
    fields = (app.application_number, app.description, app.applicant_name)
    return any(f and q in f.lower() for f in fields)

def filter_applications(apps: Iterable[ApplicationRecord], state: FilterState) -> List[ApplicationRecord]:
    """Search / agency / status-checkbox filtering, input order kept"""
    q = state.search.strip().lower()
    out = []
    for a in apps:
        if q and not _matches_search(a, q):
            continue
        if state.agency != "all" and a.agency != state.agency:
            continue
        if state.statuses and decoded_status(a) not in state.statuses:
            continue
        out.append(a)
    return out


# ------------------------------------------------------------
# 3) Primary-row selection over filing families
# ------------------------------------------------------------

@dataclass(frozen=True, eq=False)
class FilingListing:
    display: Tuple[ApplicationRecord, ...] = ()
    related: Dict[str, Tuple[ApplicationRecord, ...]] = field(default_factory=dict)
    active_count: int = 0
    total_count: int = 0

    def related_filings(self, app: ApplicationRecord) -> Tuple[ApplicationRecord, ...]:
        return self.related.get(app.id, ())

def _filing_date_key(app: ApplicationRecord) -> str:
    return app.filing_date.isoformat() if app.filing_date else ""

def select_display(
    filtered: Iterable[ApplicationRecord],
    all_apps: Optional[Iterable[ApplicationRecord]] = None,
) -> Tuple[Tuple[ApplicationRecord, ...], Dict[str, Tuple[ApplicationRecord, ...]]]:
    """
    Pick the top-level rows among `filtered`:
      - standalone numbers (no filing suffix)
      - the initial (I*) filing of each family
      - subsequent filings whose family has no initial filing in `filtered`
    Rows are sorted newest filing first; missing dates sort last.
    Related filings come from the families of `all_apps` (defaults to `filtered`).
    """
    filtered = list(filtered)
    all_apps = filtered if all_apps is None else list(all_apps)

    parsed = [(a, parse_filing_number(a.application_number)) for a in filtered]
    initial_by_prefix: Dict[str, ApplicationRecord] = {}
    for a, fn in parsed:
        if is_initial_suffix(fn.suffix):
            initial_by_prefix.setdefault(fn.prefix, a)

    display = []
    for a, fn in parsed:
        if fn.suffix is None:
            display.append(a)
        elif is_initial_suffix(fn.suffix):
            if initial_by_prefix[fn.prefix] is a:
                display.append(a)
        elif fn.prefix not in initial_by_prefix:
            display.append(a)
    display.sort(key=_filing_date_key, reverse=True)

    families = group_families(all_apps)
    related: Dict[str, Tuple[ApplicationRecord, ...]] = {}
    for a in display:
        fn = parse_filing_number(a.application_number)
        if fn.suffix is None:
            continue
        related[a.id] = tuple(m for m in families.get(fn.prefix, []) if m.id != a.id)

    return tuple(display), related

def build_listing(apps: Iterable[ApplicationRecord], state: Optional[FilterState] = None) -> FilingListing:
    """Filter, select primary rows and count; None state = default filter"""
    apps = list(apps)
    if state is None:
        state = default_filter_state(apps)
    filtered = filter_applications(apps, state)
    display, related = select_display(filtered, apps)
    listing = FilingListing(
        display=display,
        related=related,
        active_count=sum(1 for a in apps if is_active(a)),
        total_count=len(apps),
    )
    logger.debug(
        "listing: %d records, %d filtered, %d rows",
        len(apps), len(filtered), len(display),
    )
    return listing


# ------------------------------------------------------------
# 4) Structured output (serialize to JSON as needed)
# ------------------------------------------------------------

def application_row_dict(app: ApplicationRecord) -> Dict[str, object]:
    fn = parse_filing_number(app.application_number)
    return {
        "id": app.id,
        "application_number": app.application_number,
        "filing": {"prefix": fn.prefix, "suffix": fn.suffix},
        "agency": app.agency,
        "source": app.source,
        "status": {
            "raw": app.status,
            "decoded": decoded_status(app),
            "style": status_style(app),
            "code_note": describe_status_code(app.status, app.source),
            "active": is_active(app),
        },
        "filed": format_short_date(app.filing_date),
        "approved": format_short_date(app.approval_date),
        "expires": format_short_date(app.expiration_date),
        "application_type": app.application_type,
        "work_type": app.work_type,
        "description": app.description,
        "applicant_name": app.applicant_name,
        "owner_name": app.owner_name,
        "estimated_cost": app.estimated_cost,
        "url": application_url(app),
    }

def listing_dict(listing: FilingListing, state: FilterState) -> Dict[str, object]:
    rows = []
    for app in listing.display:
        row = application_row_dict(app)
        related = listing.related_filings(app)
        row["related_count"] = len(related)
        if app.id in state.expanded:
            row["related"] = [application_row_dict(r) for r in related]
        rows.append(row)
    return {
        "summary": {
            "total": listing.total_count,
            "active": listing.active_count,
            "shown": len(listing.display),
        },
        "filters": {
            "search": state.search,
            "agency": state.agency,
            "statuses": sorted(state.statuses),
        },
        "rows": rows,
    }
