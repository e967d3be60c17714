from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from typing import Any

import tomli_w
from platformdirs import user_config_dir

from . import console

APP_NAME = "petitions"
CONFIG_FILENAME = "config.toml"
ENV_API_HOST = "PETITIONS_API_HOST"
ENV_API_KEY = "PETITIONS_API_KEY"
ENV_ALLOW_INSECURE = "PETITIONS_ALLOW_INSECURE"

_WARNED_HOST_SCHEME = False


@dataclass
class AppConfig:
    host: str
    api_key: str = ""
    allow_insecure_tls: bool = False


def config_path() -> str:
    return f"{user_config_dir(APP_NAME)}/{CONFIG_FILENAME}"


def default_config() -> AppConfig:
    return AppConfig(host="", api_key="", allow_insecure_tls=False)


def normalize_host(raw: str | None, *, warn: bool = False) -> str:
    value = (raw or "").strip()
    if not value:
        return ""
    value = value.rstrip("/")
    lowered = value.lower()
    if lowered.startswith("http://") or lowered.startswith("https://"):
        return value

    host = value.split("/", 1)[0]
    host = host.split(":", 1)[0].lower()
    if host in {"localhost", "127.0.0.1", "0.0.0.0"}:
        scheme = "http://"
    else:
        scheme = "https://"

    normalized = f"{scheme}{value}"
    if warn:
        _warn_missing_scheme(normalized)
    return normalized


def _warn_missing_scheme(normalized: str) -> None:
    global _WARNED_HOST_SCHEME
    if _WARNED_HOST_SCHEME:
        return
    if not _is_interactive():
        return
    console.warn(f"host missing scheme, assuming {normalized}")
    _WARNED_HOST_SCHEME = True


def _is_interactive() -> bool:
    import sys
    return bool(sys.stderr.isatty() or sys.stdout.isatty())


def _env_flag(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


def to_toml(cfg: AppConfig) -> dict[str, Any]:
    return {
        "host": cfg.host,
        "api_key": cfg.api_key,
        "allow_insecure_tls": cfg.allow_insecure_tls,
    }


def from_toml(data: dict[str, Any]) -> AppConfig:
    insecure = data.get("allow_insecure_tls")
    return AppConfig(
        host=normalize_host(str(data.get("host") or ""), warn=True),
        api_key=str(data.get("api_key") or "").strip(),
        allow_insecure_tls=insecure if isinstance(insecure, bool) else False,
    )


def load_config() -> AppConfig:
    path = config_path()
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
        cfg = from_toml(data)
    except FileNotFoundError:
        cfg = default_config()
    return apply_env(cfg)


def apply_env(cfg: AppConfig) -> AppConfig:
    host = os.getenv(ENV_API_HOST, "").strip()
    api_key = os.getenv(ENV_API_KEY, "").strip()
    insecure = os.getenv(ENV_ALLOW_INSECURE)
    return AppConfig(
        host=normalize_host(host) if host else cfg.host,
        api_key=api_key or cfg.api_key,
        allow_insecure_tls=_env_flag(insecure) if insecure is not None else cfg.allow_insecure_tls,
    )


def save_config(cfg: AppConfig) -> str:
    path = config_path()
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "wb") as f:
        f.write(tomli_w.dumps(to_toml(cfg)).encode("utf-8"))
    os.chmod(path, 0o600)
    return path
