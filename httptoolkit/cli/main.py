"""httptoolkit CLI entry point.

    httptoolkit random-string 32        -> print a random token
    httptoolkit slug "Some Title"       -> print a URL slug
    httptoolkit post URL --data '{...}' -> POST JSON and show the reply
    httptoolkit serve                   -> run the reference service
"""

from __future__ import annotations

import asyncio
import json
import logging

import click

from httptoolkit.cli import output as out
from httptoolkit.core.config import get_settings
from httptoolkit.core.errors import RemoteError, SlugError
from httptoolkit.core.lifecycle import CloseListener
from httptoolkit.tools import Tools


@click.group()
@click.version_option(version=out.VERSION, prog_name="httptoolkit")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Small HTTP helpers: random strings, slugs, JSON dispatch and a demo server."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["tools"] = Tools.from_settings(get_settings())


# ---------------------------------------------------------------------------
# random-string / slug
# ---------------------------------------------------------------------------


@cli.command("random-string")
@click.argument("length", type=click.IntRange(min=0), default=20)
@click.pass_obj
def random_string(obj: dict, length: int) -> None:
    """Print LENGTH random characters (letters, digits and ~!@#$)."""
    click.echo(obj["tools"].random_string(length))


@cli.command()
@click.argument("text")
@click.pass_obj
def slug(obj: dict, text: str) -> None:
    """Print a URL slug built from TEXT."""
    try:
        click.echo(obj["tools"].create_slug(text))
    except SlugError as exc:
        out.print_error("Could not create slug", detail=str(exc))
        raise SystemExit(1) from exc


# ---------------------------------------------------------------------------
# post: send JSON to a remote endpoint
# ---------------------------------------------------------------------------


def _parse_json_option(ctx: click.Context, param: click.Parameter, value: str) -> object:
    try:
        return json.loads(value)
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"not valid JSON ({exc.msg} at character {exc.pos + 1})") from exc


@cli.command()
@click.argument("url")
@click.option("--data", "-d", default="{}", callback=_parse_json_option, help="JSON payload to send")
@click.pass_obj
def post(obj: dict, url: str, data: object) -> None:
    """POST a JSON payload to URL and print the response."""
    tools: Tools = obj["tools"]
    try:
        response, status_code = asyncio.run(tools.post_json_to_remote(url, data))
    except RemoteError as exc:
        out.print_error("Request failed", detail=str(exc), suggestion="Check the URL and that the server is up")
        raise SystemExit(1) from exc

    out.print_status(status_code)
    out.print_body(response.text)


# ---------------------------------------------------------------------------
# serve: run the reference service
# ---------------------------------------------------------------------------


@cli.command()
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", default=8000, show_default=True, type=int)
def serve(host: str, port: int) -> None:
    """Run the reference upload/JSON service until interrupted."""
    import uvicorn

    from httptoolkit.main import create_app

    out.print_banner(host, port)
    # uvicorn drains connections first, then hands the signal back to the listener.
    with CloseListener():
        uvicorn.run(create_app(get_settings()), host=host, port=port, log_level="info")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
