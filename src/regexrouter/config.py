"""Declarative route tables.

A route table is a JSON document such as::

    {
        "strict": true,
        "routes": [
            {"method": "GET", "pattern": "/user/[0-9]+", "handler": "myapp.views:show_user"},
            {"method": "POST", "pattern": "/user", "handler": "myapp.views:create_user"}
        ]
    }

Routes are registered in listed order, so earlier entries shadow later ones.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, ImportString

from regexrouter.routing import Method, Router, RouterBuilder


class RouteConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    method: Method
    pattern: str
    handler: ImportString[Callable[..., Any]]


class RouteTableConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    strict: bool = False
    routes: list[RouteConfig] = []


def builder_from_config(data: RouteTableConfig | Mapping[str, Any]) -> RouterBuilder:
    """Register every route of *data* on a new :class:`RouterBuilder`."""
    table = data if isinstance(data, RouteTableConfig) else RouteTableConfig.model_validate(data)
    builder = RouterBuilder(strict=table.strict)
    for route in table.routes:
        builder.add_route(route.method, route.pattern, route.handler)
    return builder


def load_route_table(path: str | Path) -> Router:
    """Read a JSON route table from *path* and freeze it into a :class:`Router`."""
    table = RouteTableConfig.model_validate_json(Path(path).read_text(encoding="utf-8"))
    return builder_from_config(table).build()
