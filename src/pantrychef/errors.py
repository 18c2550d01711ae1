"""Error taxonomy shared by the extraction core."""

from __future__ import annotations


class PantryChefError(Exception):
    """Base class for pantrychef errors."""


class ValidationError(PantryChefError):
    """Raised when required input is missing before any upstream work is attempted."""


class UpstreamUnavailable(PantryChefError):
    """Raised when the OCR or generative-text collaborator fails or returns nothing usable."""

    def __init__(self, upstream: str, message: str) -> None:
        super().__init__(message)
        self.upstream = upstream


class ExtractionFailed(PantryChefError):
    """Internal signal: no structured value could be recovered from the text."""

    def __init__(self, reason: str, raw_text: str) -> None:
        super().__init__(reason)
        self.reason = reason
        self.raw_text = raw_text


__all__ = ["PantryChefError", "ValidationError", "UpstreamUnavailable", "ExtractionFailed"]
