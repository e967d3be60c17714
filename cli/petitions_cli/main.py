from __future__ import annotations

import typer

from .commands import config_cmd, petitions_cmd
from .logging_ import setup_logging


def _build_app() -> typer.Typer:
    app = typer.Typer(
        name="petitions",
        help="Petitions API CLI",
        no_args_is_help=True,
    )

    app.command("list")(petitions_cmd.list_petitions)
    app.command("get")(petitions_cmd.get_petition)
    app.command("signatures")(petitions_cmd.list_signatures)
    app.command("sign")(petitions_cmd.send_signature)
    app.command("validations")(petitions_cmd.get_validations)
    app.add_typer(config_cmd.app, name="config")

    @app.callback()
    def _main(
            verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose logs."),
    ):
        setup_logging(verbose)

    return app


app = _build_app()


def main() -> None:
    app()


if __name__ == "__main__":
    main()
