"""HTTP response classification for Orthanc API calls."""

import httpx
from pydantic import ValidationError

from ..exceptions import ApiError, OrthancDecodeError, OrthancError
from .logger import logger


def status_line(response: httpx.Response) -> str:
    """Status code and reason phrase, e.g. ``404 Not Found``."""
    reason = response.reason_phrase or "<unknown status code>"
    return f"{response.status_code} {reason}"


def check_http_error(response: httpx.Response) -> bytes:
    """Classify a fully read response.

    Any status >= 400 is an error. An empty body yields a bare error; any other
    body must be Orthanc's structured error document, which is attached as
    ``details``. A body that is not such a document raises the decode failure
    itself.

    Args:
        response: Response whose body has already been read

    Returns:
        Response body for statuses below 400

    Raises:
        OrthancError: On HTTP error statuses
        OrthancDecodeError: If an error body cannot be decoded
    """
    body = response.content
    if response.status_code < 400:
        return body

    message = f"API error: {status_line(response)}"
    if not body:
        logger.warning(message)
        raise OrthancError(message)

    try:
        details = ApiError.model_validate_json(body)
    except ValidationError as e:
        logger.error(f"Cannot decode error body of {message}: {e}")
        raise OrthancDecodeError(str(e)) from e

    logger.warning(f"{message}: {details.message} ({details.method} {details.uri})")
    raise OrthancError(message, details)
