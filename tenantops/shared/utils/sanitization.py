"""Input sanitization for free-text tenant fields (names, descriptions)."""

from typing import Any, ClassVar

import nh3


class InputSanitizer:
    """
    Strip markup from user-supplied display text.

    Tenant names and descriptions are rendered by the admin dashboard and
    in outgoing emails, so no HTML survives.
    """

    ALLOWED_TAGS: ClassVar[set[str]] = set()

    @classmethod
    def sanitize_text(cls, value: str | None) -> str | None:
        """Remove all HTML with nh3 and trim whitespace. None stays None."""
        if value is None:
            return None
        cleaned = nh3.clean(value, tags=cls.ALLOWED_TAGS, attributes={})
        return cleaned.strip()

    @classmethod
    def sanitize_dict(cls, data: dict[str, Any]) -> dict[str, Any]:
        """Recursively sanitize string values in a dict (e.g. an address object)."""
        result: dict[str, Any] = {}
        for key, value in data.items():
            if isinstance(value, str):
                result[key] = cls.sanitize_text(value)
            elif isinstance(value, dict):
                result[key] = cls.sanitize_dict(value)
            else:
                result[key] = value
        return result
