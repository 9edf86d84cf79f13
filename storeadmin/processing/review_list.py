"""
Review List Processor.

Computes the filtered, sorted and paginated slice of reviews displayed in the
admin moderation page, and removes reviews from the in-memory collection.
"""

import logging
import math
from datetime import datetime
from typing import Callable, List, Sequence

from storeadmin.models.review import Review
from storeadmin.models.filter_state import DateBucket, FilterState, ReviewView, SortOrder
import config.settings as settings

logger = logging.getLogger(__name__)


class ReviewListProcessor:
    """
    Pure computation over a review collection.

    The clock is only consulted for the relative date buckets (this month,
    last month, current year), so tests can pin "now".
    """

    def __init__(
        self,
        clock: Callable[[], datetime] = datetime.now,
        earliest_year: int = settings.EARLIEST_YEAR_BUCKET
    ):
        """
        Initialize processor.

        Args:
            clock: Returns the current local time
            earliest_year: Upper bound (inclusive) of the "earlier" bucket
        """
        self.clock = clock
        self.earliest_year = earliest_year

    def compute_view(self, reviews: Sequence[Review], state: FilterState) -> ReviewView:
        """
        Compute the page of reviews to display.

        Args:
            reviews: Full in-memory collection (not modified)
            state: Current filter, sort and paging state

        Returns:
            ReviewView with the visible slice and page/count totals
        """
        filtered = self.filter_and_sort(reviews, state)

        total_pages = max(1, math.ceil(len(filtered) / state.page_size))
        start = (state.page - 1) * state.page_size
        items = tuple(filtered[start:start + state.page_size])

        logger.debug(
            f"Computed view: {len(items)} shown, {len(filtered)}/{len(reviews)} matched, "
            f"page {state.page}/{total_pages}"
        )

        return ReviewView(
            items=items,
            total_pages=total_pages,
            filtered_count=len(filtered),
            total_count=len(reviews),
            page=state.page
        )

    def filter_and_sort(self, reviews: Sequence[Review], state: FilterState) -> List[Review]:
        """All reviews matching the query and date bucket, in display order."""
        now = self.clock()
        query = state.query.lower()

        filtered = [
            r for r in reviews
            if self._matches_query(r, query)
            and self._matches_bucket(r, state.date_bucket, now)
        ]

        # sorted() is stable: equal timestamps keep fetch order either way
        return sorted(
            filtered,
            key=lambda r: r.created_at.timestamp(),
            reverse=state.sort_order is SortOrder.DESC
        )

    def delete_review(self, reviews: Sequence[Review], review_id: int) -> List[Review]:
        """
        Return a new collection without the review with review_id.

        An unknown id returns an unchanged copy.
        """
        remaining = [r for r in reviews if r.id != review_id]
        if len(remaining) == len(reviews):
            logger.debug(f"Review {review_id} not in collection, nothing removed")
        return remaining

    def _matches_query(self, review: Review, query: str) -> bool:
        if not query:
            return True
        fields = (
            review.product_name,
            review.comment,
            review.user.name or "",
            review.user.username,
        )
        return any(query in field.lower() for field in fields)

    def _matches_bucket(self, review: Review, bucket: DateBucket, now: datetime) -> bool:
        if bucket is DateBucket.ALL:
            return True

        created = self._local(review.created_at)

        if bucket is DateBucket.THIS_MONTH:
            return (created.year, created.month) == (now.year, now.month)
        if bucket is DateBucket.LAST_MONTH:
            if now.month == 1:
                return (created.year, created.month) == (now.year - 1, 12)
            return (created.year, created.month) == (now.year, now.month - 1)
        if bucket is DateBucket.CURRENT_YEAR:
            return created.year == now.year
        if bucket is DateBucket.EARLIER:
            return created.year <= self.earliest_year
        return created.year == bucket.year

    @staticmethod
    def _local(value: datetime) -> datetime:
        # Naive timestamps are already local
        if value.tzinfo is None:
            return value
        return value.astimezone()
