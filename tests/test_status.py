"""
Tests for status decoding and badge buckets.
"""
import pytest

from filingdesk.models import SOURCE_BIS, SOURCE_DOB_NOW
from filingdesk.status import (
    BIS_STATUS_CODES, COMPLETED_KEYWORDS, STATUS_BUCKETS, UNKNOWN_STATUS,
    decode_status, status_style_bucket, is_completed_status, is_active_status,
    describe_status_code,
)


# ============================================================================
# DECODING
# ============================================================================

class TestDecodeStatus:

    def test_bis_code(self):
        assert decode_status("H", SOURCE_BIS) == "Completed"

    def test_bis_code_case_insensitive(self):
        assert decode_status("x", SOURCE_BIS) == "Signed Off / Completed"

    def test_short_source_tag_is_legacy(self):
        assert decode_status("A", "BIS") == "Pre-Filing"

    def test_unknown_code_passthrough(self):
        assert decode_status("ZZ", SOURCE_BIS) == "ZZ"

    def test_missing_status(self):
        assert decode_status(None, SOURCE_BIS) == UNKNOWN_STATUS
        assert decode_status("", SOURCE_DOB_NOW) == UNKNOWN_STATUS

    def test_filing_prefix_stripped(self):
        assert decode_status("filing withdrawn", SOURCE_DOB_NOW) == "Withdrawn"
        assert decode_status("FILING Approved", SOURCE_DOB_NOW) == "Approved"

    def test_short_code_on_modern_source_not_looked_up(self):
        assert decode_status("h", SOURCE_DOB_NOW) == "H"

    def test_long_text_on_legacy_source_normalized(self):
        assert decode_status("permit issued", SOURCE_BIS) == "Permit issued"

    def test_prefix_only_is_unknown(self):
        assert decode_status("Filing ", SOURCE_DOB_NOW) == UNKNOWN_STATUS

    @pytest.mark.parametrize("raw", [None, "", "A", "zz", "filing withdrawn", "Permit Entire"])
    @pytest.mark.parametrize("source", [SOURCE_BIS, SOURCE_DOB_NOW, "HPD"])
    def test_repeatable(self, raw, source):
        assert decode_status(raw, source) == decode_status(raw, source)

    def test_every_code_decodes(self):
        for code, label in BIS_STATUS_CODES.items():
            assert decode_status(code, SOURCE_BIS) == label


# ============================================================================
# BADGE BUCKETS
# ============================================================================

class TestStatusStyleBucket:

    @pytest.mark.parametrize("decoded,bucket", [
        ("Signed Off", "finalized"),
        ("CO Issued", "finalized"),
        ("Letter of Completion", "finalized"),
        ("Permit Issued - Entire", "issued"),
        ("Partial Permit Issued", "issued"),
        ("Pre-Filing", "in-progress"),
        ("Plan Exam Approval Pending", "in-progress"),
        ("Partial Permit", "in-progress"),
        ("Withdrawn", "terminal-negative"),
        ("Permit Expired", "terminal-negative"),
        ("Disapproved", "terminal-negative"),
        ("Permit Renewed", "unclassified"),
        ("", "unclassified"),
    ])
    def test_bucket(self, decoded, bucket):
        assert status_style_bucket(decoded) == bucket

    def test_precedence_follows_bucket_order(self):
        # matches both the finalized and issued keyword lists
        assert status_style_bucket("CO Issued") == "finalized"
        assert [b for b, _ in STATUS_BUCKETS] == [
            "finalized", "issued", "in-progress", "terminal-negative",
        ]

    def test_every_bis_code_has_a_bucket(self):
        unclassified = [
            label for label in BIS_STATUS_CODES.values()
            if status_style_bucket(label) == "unclassified"
        ]
        assert unclassified == ["Permit Renewed"]


# ============================================================================
# COMPLETED / ACTIVE
# ============================================================================

class TestCompleted:

    @pytest.mark.parametrize("decoded", COMPLETED_KEYWORDS)
    def test_keywords_are_completed(self, decoded):
        assert is_completed_status(decoded)
        assert not is_active_status(decoded)

    def test_substring_case_insensitive(self):
        assert is_completed_status("job signed off by inspector")

    @pytest.mark.parametrize("decoded", ["Permit Issued", "Withdrawn", "Unknown", ""])
    def test_active(self, decoded):
        assert is_active_status(decoded)


class TestDescribeStatusCode:

    def test_short_code(self):
        assert describe_status_code("H", SOURCE_BIS) == 'Status Code "H" → Completed'

    def test_free_text(self):
        assert describe_status_code("Permit Issued", SOURCE_DOB_NOW) is None
        assert describe_status_code(None, SOURCE_BIS) is None
