from __future__ import annotations

import logging
from typing import Any, Protocol

from .errors import ApiClientError, ApiConnectionError, ApiServerError, PetitionsError
from .errors_utils import developer_message, response_info

logger = logging.getLogger(__name__)


class ResponseVerifier(Protocol):
    def verify(self, response: Any, request_url: str) -> None:
        """Raise a :class:`PetitionsError` subclass if ``response`` is not a success."""


def _status_code(status: Any) -> Any:
    if isinstance(status, str) and status.strip().isdigit():
        return int(status.strip())
    return status


class StatusVerifier:
    """Classify responses by ``metadata.responseInfo.status``.

    Missing status is a connection failure, 500 a server error and any
    other non-200 status a client error.
    """

    def verify(self, response: Any, request_url: str) -> None:
        status = _status_code(response_info(response).get("status"))
        if not status:
            raise ApiConnectionError(
                "Could not connect to Petitions API.",
                response=response,
                request_url=request_url,
            )
        if status == 200:
            return

        message = f"Petitions API returned an error code: {developer_message(response) or status}"
        if status == 500:
            raise ApiServerError(message, response=response, request_url=request_url)
        raise ApiClientError(message, response=response, request_url=request_url)


class LoggingVerifier:
    """Log every failed verification before re-raising it."""

    def __init__(self, inner: ResponseVerifier | None = None, *, log: logging.Logger | None = None):
        self._inner = inner or StatusVerifier()
        self._log = log or logger

    def verify(self, response: Any, request_url: str) -> None:
        try:
            self._inner.verify(response, request_url)
        except PetitionsError as exc:
            self._log.warning("%s error for %s: %s", exc.kind, request_url, exc)
            raise
