"""
Review Moderation Controller.

Coordinates the admin review page: loading the collection, mapping failures
to presentation states, filter/sort/page transitions and row deletion.
"""

import logging
from datetime import datetime, timedelta
from enum import Enum
from typing import Callable, List, Optional, Set

from storeadmin.errors import (
    DeleteFailed,
    Forbidden,
    NotAuthenticated,
    StoreAdminError,
    Unauthenticated,
    classify_fetch_error,
)
from storeadmin.models.filter_state import DateBucket, FilterState, ReviewView
from storeadmin.models.review import Review
from storeadmin.processing.review_list import ReviewListProcessor
from storeadmin.services.auth import AuthProvider
from storeadmin.services.reviews_service import ReviewsService
import config.settings as settings

logger = logging.getLogger(__name__)

MSG_NOT_AUTHENTICATED = "You are not authenticated."
MSG_SESSION_EXPIRED = "Session expired. Please log in again."
MSG_FORBIDDEN = "You do not have permission to access this information."
MSG_LOAD_FAILED = "Failed to load reviews. Please try again."
MSG_DELETE_FAILED = "Failed to delete the review."
MSG_DELETED = "Review deleted successfully."


class LoadState(str, Enum):
    LOADING = "loading"
    READY = "ready"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"
    ERROR = "error"


class ReviewModerationController:
    """
    State holder for the admin review page.

    All handlers run to completion on one trigger; the only in-flight
    bookkeeping is the set of review ids currently being deleted.
    """

    def __init__(
        self,
        auth: AuthProvider,
        reviews_service: ReviewsService,
        processor: Optional[ReviewListProcessor] = None,
        clock: Callable[[], datetime] = datetime.now,
        notice_seconds: float = settings.DELETE_NOTICE_SECONDS
    ):
        """
        Initialize controller.

        Args:
            auth: Credential source
            reviews_service: Review list/delete endpoints
            processor: View computation (defaults to one sharing clock)
            clock: Current local time, drives date buckets and notice expiry
            notice_seconds: Lifetime of the delete success notice
        """
        self.auth = auth
        self.reviews_service = reviews_service
        self.clock = clock
        self.processor = processor or ReviewListProcessor(clock=clock)
        self.notice_seconds = notice_seconds

        self.reviews: List[Review] = []
        self.filter_state = FilterState()
        self.state = LoadState.LOADING
        self.error: Optional[str] = None
        self.can_retry = True

        self.pending_delete: Optional[int] = None  # Review awaiting confirmation
        self.deleting: Set[int] = set()
        self.delete_error: Optional[str] = None
        self.last_delete_failure: Optional[DeleteFailed] = None
        self._notice_until: Optional[datetime] = None

    # Loading

    def load(self) -> LoadState:
        """Fetch the full review collection and update the page state."""
        self.state = LoadState.LOADING
        self.error = None

        try:
            self.reviews = self.reviews_service.fetch_all_reviews(self.auth.get_token())
        except Exception as e:
            self._apply_load_failure(e)
            return self.state

        self.filter_state = self.filter_state.reset_page()
        self.state = LoadState.READY
        self.can_retry = True
        logger.info(f"Moderation page ready with {len(self.reviews)} reviews")
        return self.state

    def retry(self) -> LoadState:
        if not self.can_retry:
            raise RuntimeError(f"Cannot retry from state {self.state.value}")
        return self.load()

    def relogin(self) -> None:
        """Clear the expired credential so the host can route to login."""
        self.auth.logout()

    def _apply_load_failure(self, exc: Exception) -> None:
        category = classify_fetch_error(exc)
        self.can_retry = category.retryable

        if isinstance(category, Unauthenticated):
            self.state = LoadState.UNAUTHENTICATED
            self.error = MSG_NOT_AUTHENTICATED if isinstance(exc, NotAuthenticated) else MSG_SESSION_EXPIRED
        elif isinstance(category, Forbidden):
            self.state = LoadState.FORBIDDEN
            self.error = MSG_FORBIDDEN
        else:
            self.state = LoadState.ERROR
            self.error = MSG_LOAD_FAILED

        logger.error(f"Failed to load reviews ({type(category).__name__}): {exc}")

    @property
    def session_expired(self) -> bool:
        return self.error == MSG_SESSION_EXPIRED

    # Filtering

    def search(self, query: str) -> None:
        self.filter_state = self.filter_state.with_query(query)

    def clear_search(self) -> None:
        self.filter_state = self.filter_state.with_query("")

    def set_date_bucket(self, bucket: DateBucket) -> None:
        self.filter_state = self.filter_state.with_date_bucket(DateBucket(bucket))

    def toggle_sort(self) -> None:
        self.filter_state = self.filter_state.toggle_sort()

    def set_page_size(self, page_size: int) -> None:
        self.filter_state = self.filter_state.with_page_size(page_size)

    def go_to_page(self, page: int) -> None:
        self.filter_state = self.filter_state.with_page(page)

    def view(self) -> ReviewView:
        return self.processor.compute_view(self.reviews, self.filter_state)

    # Deletion

    def request_delete(self, review_id: int) -> None:
        """Open the confirmation dialog for one review."""
        self.pending_delete = review_id

    def cancel_delete(self) -> None:
        self.pending_delete = None

    @property
    def dialog_open(self) -> bool:
        return self.pending_delete is not None

    def confirm_delete(self) -> bool:
        """
        Delete the review awaiting confirmation.

        Returns:
            True if the review was deleted, False otherwise (nothing pending,
            already in flight, no credential or server failure)
        """
        review_id = self.pending_delete
        if review_id is None:
            return False
        if review_id in self.deleting:
            logger.warning(f"Delete of review {review_id} already in progress")
            return False

        token = self.auth.get_token()
        if not token:
            self.error = MSG_NOT_AUTHENTICATED
            self.delete_error = MSG_NOT_AUTHENTICATED
            self.last_delete_failure = DeleteFailed(MSG_NOT_AUTHENTICATED)
            return False

        self.deleting.add(review_id)
        self.delete_error = None
        self.last_delete_failure = None
        try:
            self.reviews_service.delete_review(token, review_id)
        except StoreAdminError as e:
            self.last_delete_failure = DeleteFailed(str(e))
            logger.error(f"Failed to delete review {review_id}: {e}")
            self.delete_error = MSG_DELETE_FAILED
            return False
        finally:
            self.deleting.discard(review_id)

        self.reviews = self.processor.delete_review(self.reviews, review_id)
        # Collection size changed
        self.filter_state = self.filter_state.reset_page()
        self.pending_delete = None
        self._notice_until = self.clock() + timedelta(seconds=self.notice_seconds)
        return True

    @property
    def success_notice(self) -> Optional[str]:
        """Message shown after a delete, until it expires."""
        if self._notice_until is None:
            return None
        if self.clock() >= self._notice_until:
            self._notice_until = None
            return None
        return MSG_DELETED
