from datetime import datetime, timezone

import pytest

from storefront.domain.serializers import as_utc
from storefront.utils import settings
from storefront.utils.paging import page_window, paginated


@pytest.mark.parametrize(
    "page, limit, expected",
    [
        (1, 10, (1, 10)),
        (0, 10, (1, 10)),
        (-3, 0, (1, 1)),
        (2, 10_000, (2, settings.MAX_PAGE_SIZE)),
    ],
)
def test_page_window_clamps(page, limit, expected):
    assert page_window(page, limit) == expected


def test_paginated_envelope():
    assert paginated(["a", "b"], 2, 2, 5) == {
        "data": ["a", "b"],
        "pagination": {"page": 2, "page_size": 2, "total": 5, "total_pages": 3},
    }
    assert paginated([], 1, 10, 0)["pagination"]["total_pages"] == 0


def test_naive_datetimes_are_read_as_utc():
    naive = datetime(2026, 1, 1, 12, 0)
    assert as_utc(naive) == datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
    assert as_utc(None) is None
