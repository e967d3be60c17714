from __future__ import annotations
from dataclasses import dataclass

DEFAULT_TIMEOUT_S = 3.0


@dataclass(frozen=True)
class ClientConfig:
    host: str
    api_key: str
    allow_insecure_tls: bool = False
    timeout_s: float = DEFAULT_TIMEOUT_S
    user_agent: str = "petitions-client/0.1.0"

    @property
    def base_url(self) -> str:
        return (self.host or "").strip().rstrip("/")
