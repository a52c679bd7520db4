"""
Error taxonomy for one analysis run.

Every failure a caller can see is an AnalysisError. The HTTP layer maps
InputError to 400 and the rest to 5xx; `message` is safe to show to users.
"""

import asyncio


class AnalysisError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InputError(AnalysisError):
    """URL missing or not an absolute http(s) URL. Raised before any render."""

    status_code = 400


class SiteUnreachableError(AnalysisError):
    """Host refused the connection or its name did not resolve."""

    status_code = 502


class NavigationTimeoutError(AnalysisError):
    status_code = 504


class RenderError(AnalysisError):
    """Anything else that failed while evaluating or capturing the page."""


CONNECTION_REFUSED_MESSAGE = (
    "Could not connect to the website. Please check if the URL is correct "
    "and the website is accessible."
)
NAME_NOT_RESOLVED_MESSAGE = (
    "Could not resolve the website domain. Please check if the URL is correct."
)
TIMEOUT_MESSAGE = "The website took too long to respond. Please try again later."
GENERIC_MESSAGE = "Failed to analyze the website. Please try again later."


def classify_navigation_error(exc: BaseException) -> AnalysisError:
    """
    Map a raw browser/navigation exception onto the taxonomy.
    Playwright reports network failures as `net::ERR_*` codes inside the message.
    """
    if isinstance(exc, AnalysisError):
        return exc
    if isinstance(exc, (asyncio.TimeoutError, TimeoutError)):
        return NavigationTimeoutError(TIMEOUT_MESSAGE)

    text = str(exc)
    if "net::ERR_CONNECTION_REFUSED" in text:
        return SiteUnreachableError(CONNECTION_REFUSED_MESSAGE)
    if "net::ERR_NAME_NOT_RESOLVED" in text:
        return SiteUnreachableError(NAME_NOT_RESOLVED_MESSAGE)
    if "timeout" in text.lower():
        return NavigationTimeoutError(TIMEOUT_MESSAGE)
    return RenderError(GENERIC_MESSAGE)
