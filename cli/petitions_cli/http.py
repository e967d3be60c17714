from __future__ import annotations

from petitions_client import LoggingVerifier, PetitionsClient
from petitions_client.config_types import ClientConfig

from .compat import cli_version
from .config import AppConfig, normalize_host


def make_client(cfg: AppConfig, *, host_override: str | None) -> PetitionsClient:
    host = normalize_host(host_override or cfg.host, warn=True)
    return PetitionsClient(
        ClientConfig(
            host=host,
            api_key=cfg.api_key,
            allow_insecure_tls=cfg.allow_insecure_tls,
            user_agent=f"petitions-cli/{cli_version()}",
        ),
        verifier=LoggingVerifier(),
    )
