"""regexrouter command-line interface powered by Typer."""

import importlib
import logging
import sys
from enum import StrEnum
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError

from regexrouter.app import RouterApp, serve as serve_app
from regexrouter.config import load_route_table
from regexrouter.routing import InvalidPatternError, RouteError, Router, RouterBuilder, handler_name

app = typer.Typer(name="regexrouter", add_completion=False, no_args_is_help=True)


class LogLevel(StrEnum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


TargetArg = Annotated[str, typer.Argument(help="module:var target or path to a JSON route table.")]


@app.callback()
def main(
    log_level: Annotated[
        LogLevel, typer.Option(case_sensitive=False, help="Logging level for regexrouter itself.")
    ] = LogLevel.WARNING,
) -> None:
    """Inspect and serve regexrouter route tables."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


# ------------------------------------------------------------------
# Target resolution
# ------------------------------------------------------------------


def _fail(message: str) -> typer.Exit:
    typer.echo(f"Error: {message}", err=True)
    return typer.Exit(1)


def _import_target(target: str) -> object:
    """Import ``module:var`` and return the attribute."""
    module_name, _, var_name = target.partition(":")
    if not module_name or not var_name:
        raise _fail(f"target {target!r} must look like module:var or end in .json")

    # Make modules in the working directory importable, as `python -m` would.
    cwd = str(Path.cwd())
    if cwd not in sys.path:
        sys.path.insert(0, cwd)

    try:
        mod = importlib.import_module(module_name)
    except Exception as exc:
        raise _fail(f"cannot import {module_name!r}: {exc}") from exc

    try:
        return getattr(mod, var_name)
    except AttributeError:
        raise _fail(f"module {module_name!r} has no attribute {var_name!r}") from None


def _resolve_router(target: str) -> Router:
    """Turn a CLI *target* into a frozen :class:`Router`.

    Accepted forms:
    - ``table.json``  → loaded with :func:`load_route_table`
    - ``module:var``  → a ``Router``, ``RouterBuilder`` (built), or ``RouterApp``
    """
    if target.endswith(".json"):
        if not Path(target).exists():
            raise _fail(f"file {target!r} not found.")
        try:
            return load_route_table(target)
        except (ValidationError, InvalidPatternError) as exc:
            raise _fail(f"invalid route table {target!r}:\n{exc}") from exc

    obj = _import_target(target)
    if isinstance(obj, RouterApp):
        return obj.router
    if isinstance(obj, RouterBuilder):
        return obj.build()
    if isinstance(obj, Router):
        return obj
    raise _fail(f"{target!r} is a {type(obj).__name__}, not a Router, RouterBuilder or RouterApp")


# ------------------------------------------------------------------
# Commands
# ------------------------------------------------------------------


@app.command()
def routes(target: TargetArg) -> None:
    """List routes in resolution order."""
    router = _resolve_router(target)
    if not router:
        typer.echo("No routes registered.")
        return
    width = max(len(route.method) for route in router)
    for index, route in enumerate(router, start=1):
        typer.echo(f"{index:>3}  {route.method:<{width}}  {route.pattern.pattern}  -> {handler_name(route.handler)}")


@app.command()
def match(
    target: TargetArg,
    method: Annotated[str, typer.Argument(help="HTTP method, e.g. GET.")],
    path: Annotated[str, typer.Argument(help="Request path, e.g. /user/42.")],
) -> None:
    """Show which handler a request would resolve to."""
    router = _resolve_router(target)
    result = router.find_handler(method.upper(), path)
    if isinstance(result, RouteError):
        typer.echo(f"{result.status_code} {result.phrase}")
        raise typer.Exit(1)
    typer.echo(handler_name(result))


@app.command()
def serve(
    target: Annotated[str, typer.Argument(help="module:var target of a RouterApp.")],
    host: Annotated[str, typer.Option(help="Bind address.")] = "127.0.0.1",
    port: Annotated[int, typer.Option(help="Bind port.")] = 8000,
    workers: Annotated[int, typer.Option(help="Number of worker processes.")] = 1,
    dev: Annotated[bool, typer.Option("--dev/--no-dev", help="Reload, debug logging and access logs.")] = False,
) -> None:
    """Serve a RouterApp with Granian."""
    obj = _import_target(target)
    if not isinstance(obj, RouterApp):
        raise _fail(f"{target!r} is a {type(obj).__name__}; serve needs a RouterApp")
    typer.echo(f"Serving {target} on http://{host}:{port} with {len(obj.router)} route(s)")
    serve_app(target, host=host, port=port, workers=workers, dev=dev)
