from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

from .errors_utils import developer_message, response_info


@dataclass(eq=False)
class PetitionsError(Exception):
    """Base client error.

    Every error keeps the decoded response body (if any) and the fully
    resolved request URL so callers can log the exact endpoint that failed.
    """

    message: str
    response: Any = None
    request_url: str | None = None

    kind: ClassVar[str] = "error"

    def __str__(self) -> str:
        return self.message


class ApiConnectionError(PetitionsError):
    """API unreachable or returned a body without a status."""

    kind = "connection"


class ApiResponseError(PetitionsError):
    """API answered with a non-200 status."""

    kind = "response"

    @property
    def status(self) -> Any:
        return response_info(self.response).get("status")

    @property
    def developer_message(self) -> str | None:
        return developer_message(self.response)


class ApiClientError(ApiResponseError):
    kind = "client"


class ApiServerError(ApiResponseError):
    kind = "server"
