"""
Structural sanity checks for raw rules text.
"""

import logging
from typing import Any, Optional

from bs4 import BeautifulSoup

from ...config import MIN_CONTENT_LENGTH, STRICT_MIN_CONTENT_LENGTH, HTML_MARKERS
from ...error_handling import ValidationFailure

logger = logging.getLogger(__name__)


def describe_html_page(text: str) -> Optional[str]:
    """Return the <title> of an HTML error page, if it has one."""
    try:
        soup = BeautifulSoup(text, 'html.parser')
        if soup.title and soup.title.string:
            return soup.title.string.strip()
    except Exception as e:
        logger.debug(f"Could not parse HTML payload: {e}")
    return None


class ContentValidator:
    """
    Cheap check that a payload looks like the plaintext rulebook.

    Used both before trusting a cache hit and before accepting a freshly
    fetched payload.
    """

    def __init__(self, min_length: int = MIN_CONTENT_LENGTH):
        self.min_length = min_length

    @classmethod
    def strict(cls) -> "ContentValidator":
        """Validator sized for the full published document."""
        return cls(min_length=STRICT_MIN_CONTENT_LENGTH)

    def check(self, text: Any) -> None:
        """
        Raise ValidationFailure describing why text is not acceptable.

        Args:
            text: Candidate payload
        """
        if not isinstance(text, str):
            raise ValidationFailure(f"Expected text, got {type(text).__name__}")

        if len(text) < self.min_length:
            raise ValidationFailure(f"Content too short: {len(text)} < {self.min_length} characters")

        lowered = text.lower()
        if any(marker in lowered for marker in HTML_MARKERS):
            title = describe_html_page(text)
            detail = f" ({title})" if title else ""
            raise ValidationFailure(f"Content is an HTML page, not plaintext rules{detail}")

    def is_valid(self, text: Any) -> bool:
        try:
            self.check(text)
        except ValidationFailure:
            return False
        return True
