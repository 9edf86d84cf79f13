"""
Filter state and view models for the review list.

FilterState is immutable; every transition returns a new instance. Any change
to query, date bucket, sort order or page size resets the page to 1.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Tuple

from storeadmin.models.review import Review
import config.settings as settings


class SortOrder(str, Enum):
    ASC = "asc"  # Oldest first
    DESC = "desc"  # Newest first

    def toggled(self) -> "SortOrder":
        return SortOrder.ASC if self is SortOrder.DESC else SortOrder.DESC


class DateBucket(str, Enum):
    """
    Named date filters offered in the admin review list.

    CURRENT_YEAR is resolved against the clock when the filter is evaluated,
    not when the bucket is chosen.
    """
    ALL = "todas"
    THIS_MONTH = "este-mes"
    LAST_MONTH = "mes-pasado"
    CURRENT_YEAR = "anio-actual"
    YEAR_2024 = "2024"
    YEAR_2023 = "2023"
    YEAR_2022 = "2022"
    YEAR_2021 = "2021"
    EARLIER = "anteriores"

    @property
    def year(self):
        """Exact year for the fixed yearly buckets, None otherwise."""
        if self.value.isdigit():
            return int(self.value)
        return None


@dataclass(frozen=True)
class FilterState:
    query: str = ""
    date_bucket: DateBucket = DateBucket.ALL
    sort_order: SortOrder = SortOrder.DESC
    page_size: int = settings.DEFAULT_PAGE_SIZE
    page: int = 1

    def __post_init__(self):
        if self.page_size not in settings.PAGE_SIZE_OPTIONS:
            raise ValueError(
                f"Invalid page size: {self.page_size}. "
                f"Must be one of {settings.PAGE_SIZE_OPTIONS}"
            )
        if self.page < 1:
            raise ValueError(f"Invalid page: {self.page}. Pages are 1-based")
        # Accept raw strings from the CLI
        object.__setattr__(self, "date_bucket", DateBucket(self.date_bucket))
        object.__setattr__(self, "sort_order", SortOrder(self.sort_order))

    def with_query(self, query: str) -> "FilterState":
        return replace(self, query=query, page=1)

    def with_date_bucket(self, bucket: DateBucket) -> "FilterState":
        return replace(self, date_bucket=bucket, page=1)

    def with_page_size(self, page_size: int) -> "FilterState":
        return replace(self, page_size=page_size, page=1)

    def toggle_sort(self) -> "FilterState":
        return replace(self, sort_order=self.sort_order.toggled(), page=1)

    def with_page(self, page: int) -> "FilterState":
        return replace(self, page=page)

    def reset_page(self) -> "FilterState":
        return replace(self, page=1)


@dataclass(frozen=True)
class ReviewView:
    """Result of computing the displayed slice of reviews."""
    items: Tuple[Review, ...]
    total_pages: int
    filtered_count: int  # Matches before paging ("showing X of Y")
    total_count: int  # Size of the whole collection
    page: int
