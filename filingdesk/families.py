import re
from typing import Dict, Iterable, List, Optional

from .models import ApplicationRecord, FilingNumber

# <job>-<I|P|S><n>[-<agency tag>], e.g. B00020213-I1-EL
FILING_NUMBER_RE = re.compile(r"^(.+?)-([IPS]\d+)(?:-([A-Z]+))?$", re.IGNORECASE)


def parse_filing_number(application_number: Optional[str]) -> FilingNumber:
    """Split an application number into its job prefix and filing suffix.

    Numbers that don't follow the DOB NOW filing pattern are standalone:
    the whole number is the prefix and the suffix is None.
    """
    number = "" if application_number is None else str(application_number)
    m = FILING_NUMBER_RE.match(number)
    if not m:
        return FilingNumber(prefix=number, suffix=None)
    prefix, code, tag = m.groups()
    suffix = code if tag is None else f"{code}-{tag}"
    return FilingNumber(prefix=prefix, suffix=suffix.upper())


def filing_code(suffix: str) -> str:
    """'I1-EL' -> 'I1'"""
    return suffix.split("-", 1)[0]


def is_initial_suffix(suffix: Optional[str]) -> bool:
    return suffix is not None and filing_code(suffix).upper().startswith("I")


def group_families(records: Iterable[ApplicationRecord]) -> Dict[str, List[ApplicationRecord]]:
    """prefix -> members, for records that carry a filing suffix."""
    families: Dict[str, List[ApplicationRecord]] = {}
    for r in records:
        fn = parse_filing_number(r.application_number)
        if fn.suffix is None:
            continue
        families.setdefault(fn.prefix, []).append(r)
    return families
