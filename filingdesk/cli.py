import argparse, json, logging, os
from dataclasses import replace
from uuid import UUID
from datetime import date

from .db import fetch_applications_for_property, load_applications_json
from .models import FilterState
from .features import (
    build_listing, default_filter_state, available_statuses, available_agencies,
    listing_dict
)

def _log_level(name: str) -> int:
    level = getattr(logging, (name or "").upper(), None)
    return level if isinstance(level, int) else logging.WARNING

def _build_state(args, apps) -> FilterState:
    state = default_filter_state(apps)
    if args.all_statuses:
        state = state.select_all_statuses(available_statuses(apps))
    elif args.status:
        state = state.select_all_statuses(args.status)
    return replace(
        state,
        search=args.search,
        agency=args.agency,
        expanded=frozenset(args.expand or ()),
    )

def main(argv=None):
    ap = argparse.ArgumentParser(description="Permit applications listing")
    src = ap.add_mutually_exclusive_group(required=True)
    src.add_argument("--property-id", type=UUID, help="Property UUID")
    src.add_argument("--input", help="JSON array of application rows")
    ap.add_argument("--search", default="")
    ap.add_argument("--agency", default="all")
    ap.add_argument("--status", action="append", help="Decoded status to show (repeatable)")
    ap.add_argument("--all-statuses", action="store_true", help="Include completed filings")
    ap.add_argument("--expand", action="append", help="Record id to show related filings for")
    ap.add_argument("-v", "--verbose", action="store_true")
    args = ap.parse_args(argv)

    level = logging.DEBUG if args.verbose else _log_level(os.getenv("FILINGDESK_LOG_LEVEL", "WARNING"))
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    # Load records
    if args.input:
        apps = load_applications_json(args.input)
    else:
        apps = fetch_applications_for_property(args.property_id)

    state = _build_state(args, apps)
    listing = build_listing(apps, state)

    out = listing_dict(listing, state)
    out["options"] = {
        "agencies": available_agencies(apps),
        "statuses": available_statuses(apps),
    }
    out["_meta"] = {"generated_on": date.today().isoformat()}

    print(json.dumps(out, ensure_ascii=False, indent=2))

if __name__ == "__main__":
    main()
