"""
Mapping of transport failures to the structured Lightspeed error record.
"""

import logging
from typing import Any, Dict, Optional, Tuple

import httpx

from lightspeed.config.constants import UNKNOWN_ERROR
from lightspeed.models.domain.error import LightspeedAccessDenied, LightspeedError

logger = logging.getLogger(__name__)

UNAUTHORIZED_CODE = "fallback__unauthorized"
TIMEOUT_CODE = "fallback__timeout"
UNKNOWN_CODE = "fallback__unknown"

_STATUS_FALLBACKS: Dict[int, Tuple[str, str]] = {
    400: (
        "fallback__bad_request",
        "Bad Request response. Please try again.",
    ),
    401: (
        UNAUTHORIZED_CODE,
        "User not authorized to access Ansible Lightspeed.",
    ),
    403: (
        "fallback__permission_denied",
        "You do not have permission to access Ansible Lightspeed. "
        "Please contact your administrator.",
    ),
    404: (
        "fallback__not_found",
        "The requested resource could not be found. Please try again.",
    ),
    413: (
        "fallback__too_large",
        "Too much text. Try again with less text.",
    ),
    429: (
        "fallback__too_many_requests",
        "Too many requests to Ansible Lightspeed. Please try again later.",
    ),
    500: (
        "fallback__internal_server",
        "An error occurred attempting to complete your request. "
        "Please try again later.",
    ),
}

_UNKNOWN_STATUS_MESSAGE = (
    "An error occurred attempting to complete your request. "
    "Please try again later."
)
_TIMEOUT_MESSAGE = "Ansible Lightspeed connection timeout. Please try again later."


def _response_body(response: httpx.Response) -> Optional[Dict[str, Any]]:
    try:
        body = response.json()
    except ValueError:
        return None
    return body if isinstance(body, dict) else None


def map_error(error: Exception) -> LightspeedError:
    """
    Map an exception raised while talking to the service to a LightspeedError.

    Args:
        error: The exception raised by the transport or the response check

    Returns:
        The structured error; a 401 always maps to the unauthorized code so
        callers can trigger the reconnect flow.
    """
    if isinstance(error, httpx.HTTPStatusError):
        status_code = error.response.status_code
        fallback_code, fallback_message = _STATUS_FALLBACKS.get(
            status_code, (UNKNOWN_CODE, _UNKNOWN_STATUS_MESSAGE)
        )
        if status_code == 401:
            return LightspeedError(fallback_code, fallback_message)

        body = _response_body(error.response)
        if body and body.get("code"):
            return LightspeedError(
                body["code"],
                body.get("message") or fallback_message,
                body.get("detail"),
            )
        return LightspeedError(fallback_code, fallback_message)

    # a token that cannot be granted is handled like a 401
    if isinstance(error, LightspeedAccessDenied):
        return LightspeedError(UNAUTHORIZED_CODE, _STATUS_FALLBACKS[401][1], str(error))

    if isinstance(error, httpx.TimeoutException):
        return LightspeedError(TIMEOUT_CODE, _TIMEOUT_MESSAGE)

    if isinstance(error, httpx.HTTPError):
        return LightspeedError(UNKNOWN_CODE, str(error) or UNKNOWN_ERROR)

    logger.debug(f"Unexpected error type {type(error).__name__}: {error}")
    return LightspeedError(UNKNOWN_CODE, UNKNOWN_ERROR)
