# reunion/core/errors.py
# Error taxonomy shared by services and routes.
# Services raise these; routes map `status_code` onto the HTTP response.

from __future__ import annotations
from typing import Optional


class ReunionError(Exception):
    """Base class for every failure the data layer reports to callers."""
    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(ReunionError):
    """A required credential or identifier is missing."""
    status_code = 400


class UpstreamAPIError(ReunionError):
    """
    Drive / Sheets answered with a non-success status, or could not be reached.
    `status` is the provider's HTTP status when one was received (None on transport errors).
    """
    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status

    @property
    def status_code(self) -> int:  # type: ignore[override]
        # Pass through the statuses the UI has a dedicated message for.
        if self.status in (403, 404, 429):
            return self.status
        return 500


class EmptyResultError(ReunionError):
    """The query succeeded but nothing qualified (e.g. a folder with no photos/videos)."""
    status_code = 404


class ParseError(ReunionError):
    """The spreadsheet envelope or its JSON body could not be parsed."""
    status_code = 500


class RateLimitExceeded(ReunionError):
    status_code = 429

    def __init__(self, message: str = "Rate limit exceeded. Please try again later.") -> None:
        super().__init__(message)
