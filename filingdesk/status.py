"""
Permit filing status decoding and badge classification.

BIS reports job status as a one-letter code; DOB NOW reports free text such as
"Filing Withdrawn". Everything here is table driven so the tables can be
checked on their own.
"""
from typing import Optional, Tuple

from .models import is_legacy_source

UNKNOWN_STATUS = "Unknown"

# DOB BIS job status codes
BIS_STATUS_CODES = {
    "A": "Pre-Filing",
    "B": "Plan Examination",
    "C": "Plan Exam Approval Pending",
    "D": "Plan Approved",
    "E": "Partial Permit Issued",
    "F": "Permit Issued - Entire",
    "G": "Permit Renewed",
    "H": "Completed",
    "I": "Signed Off",
    "J": "Letter of Completion",
    "K": "CO Issued",
    "L": "Withdrawn",
    "M": "Disapproved",
    "N": "Suspended",
    "P": "Permit Expired",
    "Q": "Partial Permit",
    "R": "Plan Exam - Incomplete",
    "X": "Signed Off / Completed",
}

FILING_PREFIX = "filing "

# First match wins, in this order.
STATUS_BUCKETS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("finalized", ("signed off", "completed", "co issued", "letter of completion")),
    ("issued", ("permit issued", "permit entire", "issued")),
    ("in-progress", ("pre-filing", "plan exam", "partial permit", "pending",
                     "filed", "in review", "plan approved")),
    ("terminal-negative", ("disapproved", "withdrawn", "suspended", "expired",
                           "denied", "cancelled")),
)
UNCLASSIFIED = "unclassified"

COMPLETED_KEYWORDS = (
    "Signed Off",
    "Signed Off / Completed",
    "Completed",
    "CO Issued",
    "Letter of Completion",
)


def decode_status(raw: Optional[str], source: str) -> str:
    """Human readable label for a raw status and its source system."""
    if not raw:
        return UNKNOWN_STATUS
    if is_legacy_source(source) and len(raw) <= 2:
        return BIS_STATUS_CODES.get(raw.upper(), raw)
    label = raw
    if label.lower().startswith(FILING_PREFIX):
        label = label[len(FILING_PREFIX):]
    if not label:
        return UNKNOWN_STATUS
    return label[:1].upper() + label[1:]


def status_style_bucket(decoded: str) -> str:
    s = (decoded or "").lower()
    for bucket, keywords in STATUS_BUCKETS:
        if any(k in s for k in keywords):
            return bucket
    return UNCLASSIFIED


def is_completed_status(decoded: str) -> bool:
    s = (decoded or "").lower()
    return any(k.lower() in s for k in COMPLETED_KEYWORDS)


def is_active_status(decoded: str) -> bool:
    return not is_completed_status(decoded)


def describe_status_code(raw: Optional[str], source: str) -> Optional[str]:
    """'Status Code "H" → Completed' for short codes, None for free text."""
    if not raw or len(raw) > 2:
        return None
    return f'Status Code "{raw}" → {decode_status(raw, source)}'
