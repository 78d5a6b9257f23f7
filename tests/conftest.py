"""
Shared fixtures: application record factory and a small filing family.
"""
from datetime import date
from itertools import count

import pytest

from filingdesk.models import ApplicationRecord, SOURCE_BIS, SOURCE_DOB_NOW

_ids = count(1)


def make_app(number, status=None, source=SOURCE_DOB_NOW, filing_date=None, **kw):
    kw.setdefault("id", f"app-{next(_ids)}")
    return ApplicationRecord(
        application_number=number,
        source=source,
        status=status,
        filing_date=filing_date,
        **kw,
    )


@pytest.fixture
def app_factory():
    return make_app


@pytest.fixture
def family():
    """B00020213 initial + subsequent filing, and a standalone BIS job."""
    initial = make_app("B00020213-I1-EL", "Permit Issued", filing_date=date(2024, 3, 1), id="i1")
    subsequent = make_app("B00020213-P1-EL", "Filing Approved", filing_date=date(2024, 6, 1), id="p1")
    standalone = make_app("C00099999", "R", source=SOURCE_BIS, filing_date=date(2023, 1, 5), id="c1")
    return [initial, subsequent, standalone]
