from .client import PetitionsClient
from .config_types import ClientConfig
from .errors import (
    ApiClientError,
    ApiConnectionError,
    ApiResponseError,
    ApiServerError,
    PetitionsError,
)
from .query import build_query_string, parse_query_string
from .verify import LoggingVerifier, ResponseVerifier, StatusVerifier

__all__ = [
    "PetitionsClient",
    "ClientConfig",
    "PetitionsError",
    "ApiConnectionError",
    "ApiResponseError",
    "ApiClientError",
    "ApiServerError",
    "build_query_string",
    "parse_query_string",
    "ResponseVerifier",
    "StatusVerifier",
    "LoggingVerifier",
]
