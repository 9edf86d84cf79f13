"""
Unit tests for the Review List Processor.

The clock is pinned so the relative date buckets are deterministic.
"""

import os
import time
import pytest
from datetime import datetime
from storeadmin.models.review import Review
from storeadmin.models.filter_state import DateBucket, FilterState, SortOrder
from storeadmin.processing.review_list import ReviewListProcessor


NOW = datetime(2025, 1, 15, 12, 0, 0)


def make_review(review_id, fecha, detalle="Buen juego", username=None, name=None,
                product=("juego", "Hollow Knight"), puntaje=4):
    venta = {"id": 1000 + review_id}
    if product:
        key, nombre = product
        venta[key] = {"id": review_id, "nombre": nombre}
    return Review.from_dict({
        "id": review_id,
        "fecha": fecha,
        "puntaje": puntaje,
        "detalle": detalle,
        "usuario": {
            "id": review_id,
            "nombre": name,
            "nombreUsuario": username or f"user{review_id}"
        },
        "venta": venta
    })


@pytest.fixture
def processor():
    return ReviewListProcessor(clock=lambda: NOW)


@pytest.fixture
def mixed_years():
    """20 reviews: ids 1-8 in 2023, ids 9-20 in 2024."""
    reviews = []
    for i in range(1, 9):
        reviews.append(make_review(i, f"2023-{i:02d}-10T09:00:00"))
    for i in range(9, 21):
        reviews.append(make_review(i, f"2024-{i - 8:02d}-05T09:00:00"))
    return reviews


def test_empty_collection(processor):
    """Empty input yields one empty page."""
    view = processor.compute_view([], FilterState())

    assert view.items == ()
    assert view.total_pages == 1
    assert view.filtered_count == 0
    assert view.total_count == 0


def test_year_bucket_sorted_descending(processor, mixed_years):
    """Bucket 2023 keeps only 2023 reviews, newest first."""
    state = FilterState(date_bucket=DateBucket.YEAR_2023)
    view = processor.compute_view(mixed_years, state)

    assert view.filtered_count == 8
    assert all(r.created_at.year == 2023 for r in view.items)
    assert view.items[0].created_at == datetime(2023, 8, 10, 9, 0)
    assert [r.id for r in view.items] == [8, 7, 6, 5, 4, 3, 2, 1]


def test_sort_ascending(processor, mixed_years):
    state = FilterState(sort_order=SortOrder.ASC, page_size=30)
    view = processor.compute_view(mixed_years, state)

    dates = [r.created_at for r in view.items]
    assert dates == sorted(dates)
    assert view.items[0].id == 1


def test_sort_descending_adjacent_pairs(processor, mixed_years):
    view = processor.compute_view(mixed_years, FilterState(page_size=30))

    for a, b in zip(view.items, view.items[1:]):
        assert a.created_at >= b.created_at


def test_ties_keep_fetch_order(processor):
    """Reviews with identical timestamps stay in arrival order both ways."""
    same = "2024-06-01T10:00:00"
    reviews = [
        make_review(3, same),
        make_review(1, same),
        make_review(2, same),
        make_review(4, "2024-07-01T10:00:00"),
    ]

    desc = processor.compute_view(reviews, FilterState())
    asc = processor.compute_view(reviews, FilterState(sort_order=SortOrder.ASC))

    assert [r.id for r in desc.items] == [4, 3, 1, 2]
    assert [r.id for r in asc.items] == [3, 1, 2, 4]


def test_second_page_with_single_item(processor):
    """16 matches with page size 15: page 2 has exactly one review."""
    reviews = [make_review(i, f"2024-03-{i:02d}T08:00:00") for i in range(1, 17)]
    view = processor.compute_view(reviews, FilterState(page_size=15, page=2))

    assert view.total_pages == 2
    assert len(view.items) == 1
    assert view.items[0].id == 1  # Oldest, since newest come first


def test_out_of_range_page_is_empty(processor, mixed_years):
    view = processor.compute_view(mixed_years, FilterState(page=99))

    assert view.items == ()
    assert view.total_pages == 2
    assert view.filtered_count == 20


@pytest.mark.parametrize("page_size", [15, 30, 50])
def test_total_pages_formula(processor, mixed_years, page_size):
    view = processor.compute_view(mixed_years, FilterState(page_size=page_size))

    expected = max(1, -(-20 // page_size))
    assert view.total_pages == expected


def test_query_matches_handle_case_insensitive(processor):
    """Query 'ALICE' finds only the review by handle alice99."""
    reviews = [
        make_review(1, "2024-01-01T00:00:00", username="alice99"),
        make_review(2, "2024-01-02T00:00:00", username="bob"),
        make_review(3, "2024-01-03T00:00:00", username="carol", name="Carol"),
    ]

    for query in ("alice", "ALICE", "Alice"):
        view = processor.compute_view(reviews, FilterState(query=query))
        assert [r.id for r in view.items] == [1]


def test_query_matches_product_comment_and_display_name(processor):
    reviews = [
        make_review(1, "2024-01-01T00:00:00", product=("servicio", "Soporte Premium")),
        make_review(2, "2024-01-02T00:00:00", detalle="Excelente soporte"),
        make_review(3, "2024-01-03T00:00:00", name="Sopo Gómez"),
        make_review(4, "2024-01-04T00:00:00", detalle="Nada que ver"),
    ]

    view = processor.compute_view(reviews, FilterState(query="sopo"))

    assert sorted(r.id for r in view.items) == [1, 2, 3]


def test_unknown_product_is_searchable(processor):
    reviews = [
        make_review(1, "2024-01-01T00:00:00", product=None),
        make_review(2, "2024-01-02T00:00:00"),
    ]

    view = processor.compute_view(reviews, FilterState(query="desconocido"))

    assert [r.id for r in view.items] == [1]


def test_missing_display_name_does_not_break_search(processor):
    reviews = [make_review(1, "2024-01-01T00:00:00", name=None)]

    view = processor.compute_view(reviews, FilterState(query="zzz"))

    assert view.filtered_count == 0


def test_this_month_and_last_month_wrap_year(processor):
    """In January, last month is December of the previous year."""
    reviews = [
        make_review(1, "2025-01-03T10:00:00"),
        make_review(2, "2024-12-20T10:00:00"),
        make_review(3, "2025-12-20T10:00:00"),
        make_review(4, "2024-01-10T10:00:00"),
    ]

    this_month = processor.compute_view(reviews, FilterState(date_bucket=DateBucket.THIS_MONTH))
    last_month = processor.compute_view(reviews, FilterState(date_bucket=DateBucket.LAST_MONTH))

    assert [r.id for r in this_month.items] == [1]
    assert [r.id for r in last_month.items] == [2]


def test_current_year_follows_clock(mixed_years):
    """The current-year bucket is resolved when the view is computed."""
    now = {"value": datetime(2023, 6, 1)}
    processor = ReviewListProcessor(clock=lambda: now["value"])
    state = FilterState(date_bucket=DateBucket.CURRENT_YEAR, page_size=50)

    assert processor.compute_view(mixed_years, state).filtered_count == 8

    now["value"] = datetime(2024, 6, 1)
    assert processor.compute_view(mixed_years, state).filtered_count == 12

    now["value"] = datetime(2026, 6, 1)
    assert processor.compute_view(mixed_years, state).filtered_count == 0


def test_earlier_bucket_includes_2020_and_before(processor):
    reviews = [
        make_review(1, "2020-12-31T23:00:00"),
        make_review(2, "2018-05-05T10:00:00"),
        make_review(3, "2021-01-01T01:00:00"),
    ]

    view = processor.compute_view(reviews, FilterState(date_bucket=DateBucket.EARLIER))

    assert [r.id for r in view.items] == [1, 2]


def test_query_and_bucket_are_combined(processor, mixed_years):
    reviews = mixed_years + [make_review(99, "2023-03-03T00:00:00", username="alice99")]
    state = FilterState(query="alice", date_bucket=DateBucket.YEAR_2024)

    assert processor.compute_view(reviews, state).filtered_count == 0


def test_compute_view_is_pure(processor, mixed_years):
    original = list(mixed_years)
    state = FilterState(query="user1", sort_order=SortOrder.ASC)

    first = processor.compute_view(mixed_years, state)
    second = processor.compute_view(mixed_years, state)

    assert first == second
    assert mixed_years == original
    assert first.filtered_count <= len(mixed_years)


@pytest.fixture
def utc_minus_5():
    """Pin the local timezone to UTC-5 for the duration of a test."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset not available on this platform")
    previous = os.environ.get("TZ")
    os.environ["TZ"] = "EST+5"
    time.tzset()
    yield
    if previous is None:
        del os.environ["TZ"]
    else:
        os.environ["TZ"] = previous
    time.tzset()


def test_aware_timestamp_is_bucketed_in_local_time(utc_minus_5):
    """02:00 UTC on Jan 1st 2024 is still Dec 31st 2023 at UTC-5."""
    processor = ReviewListProcessor(clock=lambda: datetime(2024, 1, 10, 12, 0))
    reviews = [make_review(1, "2024-01-01T02:00:00Z")]

    in_2023 = processor.compute_view(reviews, FilterState(date_bucket=DateBucket.YEAR_2023))
    in_2024 = processor.compute_view(reviews, FilterState(date_bucket=DateBucket.YEAR_2024))
    last_month = processor.compute_view(reviews, FilterState(date_bucket=DateBucket.LAST_MONTH))

    assert in_2023.filtered_count == 1
    assert in_2024.filtered_count == 0
    assert last_month.filtered_count == 1


def test_naive_timestamp_is_taken_as_local(utc_minus_5):
    processor = ReviewListProcessor(clock=lambda: datetime(2024, 1, 10, 12, 0))
    reviews = [make_review(1, "2024-01-01T02:00:00")]

    view = processor.compute_view(reviews, FilterState(date_bucket=DateBucket.YEAR_2024))

    assert view.filtered_count == 1


def test_mixed_naive_and_aware_sort_by_instant(utc_minus_5, processor):
    """Naive 00:00 local is 05:00 UTC, so it is newer than 03:00Z."""
    reviews = [
        make_review(1, "2024-01-01T03:00:00Z"),
        make_review(2, "2024-01-01T00:00:00"),
        make_review(3, "2024-01-01T04:30:00+00:00"),
    ]

    desc = processor.compute_view(reviews, FilterState())
    asc = processor.compute_view(reviews, FilterState(sort_order=SortOrder.ASC))

    assert [r.id for r in desc.items] == [2, 3, 1]
    assert [r.id for r in asc.items] == [1, 3, 2]


def test_delete_review_removes_exactly_one(processor, mixed_years):
    result = processor.delete_review(mixed_years, 5)

    assert len(result) == 19
    assert all(r.id != 5 for r in result)
    assert len(mixed_years) == 20


def test_delete_missing_id_is_noop(processor):
    reviews = [make_review(i, f"2024-01-{i:02d}T00:00:00") for i in range(1, 6)]

    result = processor.delete_review(reviews, 7)

    assert result == reviews
    assert result is not reviews


# Run tests if executed directly
if __name__ == "__main__":
    pytest.main([__file__, "-v"])
