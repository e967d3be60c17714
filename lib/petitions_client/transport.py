from __future__ import annotations

import json
import logging
import time
from collections.abc import Mapping
from typing import Any

import httpx

from .config_types import ClientConfig
from .query import build_query_string

logger = logging.getLogger(__name__)

_clock = time.monotonic


class Transport:
    def __init__(self, cfg: ClientConfig, *, http_transport: httpx.BaseTransport | None = None):
        self._cfg = cfg
        headers = {"User-Agent": cfg.user_agent, "Accept": "application/json"}

        self._client = httpx.Client(
            timeout=cfg.timeout_s,
            headers=headers,
            verify=not cfg.allow_insecure_tls,
            transport=http_transport,
        )

    def close(self) -> None:
        self._client.close()

    def build_url(self, path: str, get_params: Mapping[str, Any] | None = None) -> str:
        url = f"{self._cfg.base_url}/{path}"

        params = dict(get_params or {})
        if self._cfg.api_key:
            params["api_key"] = self._cfg.api_key
        query = build_query_string(params)
        if not query:
            return url
        return url + ("&" if "?" in url else "?") + query

    def request(
            self,
            path: str,
            get_params: Mapping[str, Any] | None = None,
            post_body: Any | None = None,
    ) -> tuple[str, Any]:
        """Send one request and return ``(url, decoded_json)``.

        ``cfg.timeout_s`` bounds the whole exchange, body included, not just
        each network phase. The decoded body is ``None`` when the host could
        not be reached in time or did not answer with JSON; classifying that
        is up to the verifier.
        """
        url = self.build_url(path, get_params)
        kwargs: dict[str, Any] = {}
        method = "GET"
        if post_body is not None:
            method = "POST"
            kwargs["content"] = json.dumps(post_body).encode("utf-8")
            kwargs["headers"] = {"Content-Type": "application/json"}

        deadline = _clock() + self._cfg.timeout_s
        try:
            with self._client.stream(method, url, **kwargs) as r:
                body = _read_until(r, deadline)
        except httpx.RequestError as e:
            logger.debug("request to %s failed: %s", url, e)
            return url, None

        try:
            data = json.loads(body)
        except ValueError:
            logger.debug("non-JSON response from %s (HTTP %s)", url, r.status_code)
            data = None
        return url, data


def _read_until(r: httpx.Response, deadline: float) -> bytes:
    chunks: list[bytes] = []
    for chunk in r.iter_bytes():
        if _clock() > deadline:
            raise httpx.ReadTimeout("total request timeout exceeded", request=r.request)
        chunks.append(chunk)
    return b"".join(chunks)
