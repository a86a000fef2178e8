"""
Review value type.
"""

from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field

MIN_RATING = 1
MAX_RATING = 5


class Review(BaseModel):
    """A customer review of one hotel."""
    model_config = ConfigDict(frozen=True)

    hotel_id: str
    review_id: str
    rating: int = Field(..., ge=MIN_RATING, le=MAX_RATING)
    title: str = ""
    text: str = ""
    recommended: bool = True
    date: str  # reviewSubmissionTime as given, e.g. 2016-06-29T17:50:29Z
    username: str = ""

    @property
    def sort_key(self) -> Tuple[str, str]:
        return (self.date, self.review_id)

    def render(self) -> str:
        username = self.username or "Anonymous"
        return (
            f"Review by {username} on {self.date}\n"
            f"Rating: {self.rating}\n"
            f"ReviewId: {self.review_id}\n"
            f"{self.title}\n"
            f"{self.text}"
        )
