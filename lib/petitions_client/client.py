from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from .config_types import ClientConfig
from .transport import Transport
from .verify import ResponseVerifier, StatusVerifier

logger = logging.getLogger(__name__)

PROBE_PATH = "petitions.json"


def _paged_params(limit: int, offset: int, parameters: Mapping[str, Any] | None) -> dict[str, Any]:
    # Defaults win: caller parameters only add keys that are not set yet.
    params: dict[str, Any] = {"limit": limit, "offset": offset}
    for key, value in (parameters or {}).items():
        params.setdefault(key, value)
    return params


def _require_id(petition_id: str) -> str:
    value = str(petition_id or "").strip()
    if not value:
        raise ValueError("petition_id is required")
    return value


class PetitionsClient:
    """Client for the Petitions API.

    Construction probes ``petitions.json`` so a bad host or key fails
    immediately with a classified error.
    """

    def __init__(
            self,
            cfg: ClientConfig,
            *,
            verifier: ResponseVerifier | None = None,
            http_transport: httpx.BaseTransport | None = None,
    ):
        if not cfg.base_url:
            raise ValueError("host is required")
        if not cfg.api_key:
            raise ValueError("api_key is required")
        self.cfg = cfg
        self._verifier = verifier or StatusVerifier()
        self._t = Transport(cfg, http_transport=http_transport)
        try:
            self._execute(PROBE_PATH)
        except Exception:
            self._t.close()
            raise

    def __enter__(self) -> PetitionsClient:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._t.close()

    def _execute(
            self,
            path: str,
            get_params: Mapping[str, Any] | None = None,
            post_body: Any | None = None,
    ) -> Any:
        url, data = self._t.request(path, get_params, post_body)
        logger.debug("%s %s", "POST" if post_body is not None else "GET", url)
        self._verifier.verify(data, url)
        return data

    # --- API methods ---
    def list_petitions(
            self,
            limit: int = 10,
            offset: int = 0,
            parameters: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        return self._execute("petitions.json", _paged_params(limit, offset, parameters))

    def get_petition(self, petition_id: str, *, mock: bool = False) -> dict[str, Any]:
        params: dict[str, Any] = {}
        if mock:
            params["mock"] = "1"
        return self._execute(f"petitions/{_require_id(petition_id)}.json", params)

    def list_signatures(
            self,
            petition_id: str,
            limit: int = 10,
            offset: int = 0,
            parameters: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        path = f"petitions/{_require_id(petition_id)}/signatures.json"
        return self._execute(path, _paged_params(limit, offset, parameters))

    def send_signature(self, signature: Mapping[str, Any]) -> dict[str, Any]:
        """Submit a signature.

        The mapping is sent verbatim as the JSON body; checking that it holds
        the fields the API expects is the caller's job.
        """
        if not isinstance(signature, Mapping):
            raise TypeError("signature must be a mapping")
        return self._execute("signatures.json", {}, dict(signature))

    def get_validations(
            self,
            petition_id: str | None = None,
            limit: int = 10,
            offset: int = 0,
    ) -> dict[str, Any]:
        # The validations endpoint reads the key as "key"; "api_key" is still
        # added by the transport.
        params: dict[str, Any] = {
            "key": self.cfg.api_key,
            "limit": limit,
            "offset": offset,
        }
        if petition_id:
            params["petition_id"] = petition_id
        return self._execute("validations.json", params)
