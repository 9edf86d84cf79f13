"""
Reviews Service.

Admin endpoints for listing and deleting reviews.
"""

import logging
from typing import List, Optional

from storeadmin.errors import ApiError, NotAuthenticated
from storeadmin.models.review import Review
from storeadmin.services.http_client import ApiClient
import config.settings as settings

logger = logging.getLogger(__name__)


class ReviewsService:
    """Fetches and deletes reviews as an administrator."""

    def __init__(self, client: ApiClient, base_path: str = settings.REVIEWS_ADMIN_PATH):
        self.client = client
        self.base_path = base_path.rstrip("/")

    def fetch_all_reviews(self, token: Optional[str]) -> List[Review]:
        """
        Fetch every review in the store.

        Args:
            token: Bearer credential

        Returns:
            List of Review objects, in the order the API returns them

        Raises:
            NotAuthenticated: If token is missing
            ApiError: On HTTP failure (status 401/403 is preserved)
            ValueError: If a record is malformed
        """
        if not token:
            raise NotAuthenticated()

        data = self.client.get(self.base_path, token=token)
        if data is None:
            data = []
        if not isinstance(data, list):
            raise ApiError(f"Expected a list of reviews, got {type(data).__name__}")

        try:
            reviews = [Review.from_dict(item) for item in data]
        except (KeyError, TypeError, AttributeError) as e:
            raise ApiError(f"Malformed review payload: {e!r}") from e
        logger.info(f"Fetched {len(reviews)} reviews")
        return reviews

    def delete_review(self, token: Optional[str], review_id: int) -> None:
        """
        Delete one review.

        Raises:
            NotAuthenticated: If token is missing
            ApiError: On HTTP failure
        """
        if not token:
            raise NotAuthenticated()

        self.client.delete(f"{self.base_path}/{review_id}", token=token)
        logger.info(f"Deleted review {review_id}")
