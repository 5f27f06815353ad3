"""
Exception hierarchy for the HS Code classification assistant.
"""
from typing import Optional


class ClassificationError(Exception):
    """Terminal failure of a classification call."""


class NoResponseError(ClassificationError):
    """The generative model returned no text payload."""

    def __init__(self, message: str = "No response from AI"):
        super().__init__(message)


class ModelInvocationError(ClassificationError):
    """The call to the generative model failed before any text came back."""


class UnparseableResponseError(ClassificationError):
    """The model's text could not be recovered into a classification result."""

    def __init__(self, message: str, raw_text: Optional[str] = None, preview_chars: int = 500):
        self.raw_text = raw_text or ""
        self.preview = self.raw_text[:preview_chars]
        if len(self.raw_text) > preview_chars:
            self.preview += "..."
        super().__init__(message)


class FetchError(Exception):
    """Base error for timed network fetches."""

    def __init__(self, message: str, url: str = ""):
        self.url = url
        super().__init__(message)


class FetchTimeoutError(FetchError):
    """The fetch did not complete before its deadline and was aborted."""


class FetchNetworkError(FetchError):
    """The fetch failed at the transport level."""
