from __future__ import annotations

import json
from typing import Any, Callable, NoReturn

import typer
from rich.markup import escape
from rich.table import Table
from petitions_client import ApiConnectionError, ApiResponseError, PetitionsClient, PetitionsError
from petitions_client.query import assign_path, split_key

from .. import console
from ..config import load_config
from ..formatting import format_count, format_timestamp, truncate
from ..http import make_client


def parse_params(values: list[str] | None) -> dict[str, Any]:
    """Turn ``--param`` values like ``filter[status]=open`` into a nested mapping."""
    params: dict[str, Any] = {}
    for raw in values or []:
        key, sep, value = raw.partition("=")
        key = key.strip()
        if not key:
            raise typer.BadParameter(f"Invalid parameter '{raw}', expected KEY=VALUE.")
        assign_path(params, split_key(key), value if sep else None)
    return params


def _fail(action: str, e: PetitionsError) -> NoReturn:
    if isinstance(e, ApiConnectionError):
        console.err(f"{action}: could not reach {e.request_url or 'API'}.")
    elif isinstance(e, ApiResponseError):
        console.err(f"{action} ({e.kind} error, status {e.status}): {e.developer_message or e}")
    else:
        console.err(f"{action}: {e}")
    raise typer.Exit(code=2)


def _open_client(host: str | None) -> PetitionsClient:
    cfg = load_config()
    if not (host or cfg.host):
        console.err("API host is not configured. Run 'petitions config set --host ...'.")
        raise typer.Exit(code=2)
    if not cfg.api_key:
        console.err("API key is not configured. Run 'petitions config set --api-key ...'.")
        raise typer.Exit(code=2)
    try:
        return make_client(cfg, host_override=host)
    except PetitionsError as e:
        _fail("Failed to connect to Petitions API", e)


def _call(host: str | None, action: str, fn: Callable[[PetitionsClient], dict[str, Any]]) -> dict[str, Any]:
    client = _open_client(host)
    try:
        return fn(client)
    except PetitionsError as e:
        _fail(action, e)
    except (TypeError, ValueError) as e:
        console.err(str(e))
        raise typer.Exit(code=2)
    finally:
        client.close()


def _results(data: Any) -> list[dict[str, Any]]:
    items = data.get("results") if isinstance(data, dict) else None
    return [i for i in items or [] if isinstance(i, dict)]


def _print_petitions(data: dict[str, Any]) -> None:
    table = Table(title="Petitions")
    table.add_column("id", style="bold")
    table.add_column("title")
    table.add_column("status")
    table.add_column("signatures", justify="right")
    table.add_column("created")
    for p in _results(data):
        table.add_row(
            str(p.get("id", "-")),
            truncate(p.get("title")),
            str(p.get("status") or "-"),
            format_count(p.get("signatureCount")),
            format_timestamp(p.get("created")),
        )
    console.console.print(table)


def list_petitions(
        limit: int = typer.Option(10, "--limit", help="Maximum number of results."),
        offset: int = typer.Option(0, "--offset", help="Offset of the result set."),
        param: list[str] | None = typer.Option(None, "--param", "-p", help="Extra query parameter KEY=VALUE (repeatable)."),
        host: str | None = typer.Option(None, "--host", help="Override API host."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    """List petitions."""
    params = parse_params(param)
    data = _call(host, "Failed to list petitions", lambda c: c.list_petitions(limit, offset, params))
    if json_out:
        console.print_json(data)
        return
    _print_petitions(data)


def get_petition(
        petition_id: str = typer.Argument(..., help="Petition ID."),
        mock: bool = typer.Option(False, "--mock", help="Ask the API for mock data."),
        host: str | None = typer.Option(None, "--host", help="Override API host."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    """Show one petition."""
    data = _call(host, "Failed to fetch petition", lambda c: c.get_petition(petition_id, mock=mock))
    if json_out:
        console.print_json(data)
        return
    results = _results(data)
    if not results:
        console.warn(f"Petition {petition_id} returned no results.")
        return
    p = results[0]
    console.console.print(f"[bold]{escape(str(p.get('title') or '-'))}[/]")
    console.console.print(
        f"id={p.get('id', '-')} status={p.get('status') or '-'} "
        f"signatures={format_count(p.get('signatureCount'))} created={format_timestamp(p.get('created'))}"
    )
    if p.get("url"):
        console.console.print(str(p["url"]))
    if p.get("body"):
        console.console.print(str(p["body"]))


def list_signatures(
        petition_id: str = typer.Argument(..., help="Petition ID."),
        limit: int = typer.Option(10, "--limit", help="Maximum number of results."),
        offset: int = typer.Option(0, "--offset", help="Offset of the result set."),
        param: list[str] | None = typer.Option(None, "--param", "-p", help="Extra query parameter KEY=VALUE (repeatable)."),
        host: str | None = typer.Option(None, "--host", help="Override API host."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    """List signatures of a petition."""
    params = parse_params(param)
    data = _call(
        host,
        "Failed to list signatures",
        lambda c: c.list_signatures(petition_id, limit, offset, params),
    )
    if json_out:
        console.print_json(data)
        return

    table = Table(title=f"Signatures for {petition_id}")
    table.add_column("id", style="bold")
    table.add_column("name")
    table.add_column("city")
    table.add_column("state")
    table.add_column("created")
    for s in _results(data):
        table.add_row(
            str(s.get("id", "-")),
            str(s.get("name") or "-"),
            str(s.get("city") or "-"),
            str(s.get("state") or "-"),
            format_timestamp(s.get("created")),
        )
    console.console.print(table)


def send_signature(
        field: list[str] | None = typer.Option(None, "--field", "-f", help="Signature field KEY=VALUE (repeatable)."),
        file: str | None = typer.Option(None, "--file", help="Read the signature from a JSON file."),
        host: str | None = typer.Option(None, "--host", help="Override API host."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    """Submit a signature."""
    if file and field:
        console.err("Use either --field or --file, not both.")
        raise typer.Exit(code=2)

    signature: dict[str, Any]
    if file:
        try:
            with open(file, encoding="utf-8") as f:
                signature = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            console.err(f"Failed to read signature file: {e}")
            raise typer.Exit(code=2)
        if not isinstance(signature, dict):
            console.err("Signature file must contain a JSON object.")
            raise typer.Exit(code=2)
    else:
        signature = parse_params(field)
    if not signature:
        console.err("Provide signature fields with --field or --file.")
        raise typer.Exit(code=2)

    data = _call(host, "Failed to send signature", lambda c: c.send_signature(signature))
    if json_out:
        console.print_json(data)
        return
    console.ok("Signature submitted.")


def get_validations(
        petition_id: str | None = typer.Option(None, "--petition-id", help="Only validations for this petition."),
        limit: int = typer.Option(10, "--limit", help="Maximum number of results."),
        offset: int = typer.Option(0, "--offset", help="Offset of the result set."),
        host: str | None = typer.Option(None, "--host", help="Override API host."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    """List validated signatures."""
    data = _call(
        host,
        "Failed to fetch validations",
        lambda c: c.get_validations(petition_id, limit, offset),
    )
    if json_out:
        console.print_json(data)
        return

    table = Table(title="Validations")
    table.add_column("id", style="bold")
    table.add_column("petition_id")
    table.add_column("email")
    table.add_column("created")
    for v in _results(data):
        table.add_row(
            str(v.get("id") or v.get("signature_id") or "-"),
            str(v.get("petition_id") or "-"),
            str(v.get("email") or "-"),
            format_timestamp(v.get("timestamp") or v.get("created")),
        )
    console.console.print(table)
