from __future__ import annotations

import typer

from .. import console
from ..config import config_path, load_config, normalize_host, save_config

app = typer.Typer(help="Manage local CLI settings (~/.config/petitions/config.toml).")


@app.command("show")
def show_config():
    cfg = load_config()
    key_state = "(set)" if cfg.api_key else "(empty)"
    console.console.print(
        f"host={cfg.host or '-'} api_key={key_state} allow_insecure_tls={str(cfg.allow_insecure_tls).lower()}"
    )
    console.info(f"Config file: {config_path()}")


@app.command("set")
def set_config(
        host: str | None = typer.Option(None, "--host", help="Set API host, e.g. https://api.example.com/v1."),
        api_key: str | None = typer.Option(None, "--api-key", help="Set API key."),
        insecure: bool | None = typer.Option(
            None,
            "--insecure/--secure",
            help="Disable or re-enable TLS certificate verification.",
        ),
):
    if host is None and api_key is None and insecure is None:
        console.err("Nothing to update. Pass --host, --api-key or --insecure/--secure.")
        raise typer.Exit(code=2)

    cfg = load_config()
    if host is not None:
        cfg.host = normalize_host(host, warn=True)
        if not cfg.host:
            console.err("Host cannot be empty.")
            raise typer.Exit(code=2)
    if api_key is not None:
        cfg.api_key = api_key.strip()
    if insecure is not None:
        cfg.allow_insecure_tls = insecure
        if insecure:
            console.warn("TLS certificate verification is disabled.")
    saved = save_config(cfg)
    console.ok(f"Settings updated: {saved}")
