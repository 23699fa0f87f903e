"""Handler signature validation for strict mode."""

from __future__ import annotations

import inspect
from typing import Any


def validate_handler_signature(func: Any, pattern: str, method: str) -> None:
    """Validate a handler at route registration time.

    A handler is called with exactly one positional argument, the request.
    Raises :class:`TypeError` with an actionable message when *func* cannot
    be called that way.
    """
    name = getattr(func, "__qualname__", None) or getattr(func, "__name__", None) or repr(func)

    # --- Rule 1: Handler must be callable ---
    if not callable(func):
        raise TypeError(
            f"\n\nStrict-mode violation in handler {name!r} "
            f"[{method} {pattern}]\n"
            f"  Current: {type(func).__name__} instance\n"
            f"  Problem: Handler is not callable.\n"
            f"  Fix:     Register a function, bound method, or object with __call__.\n"
        )

    try:
        sig = inspect.signature(func)
    except (TypeError, ValueError):
        # Some builtins expose no signature; nothing more to check.
        return

    # --- Rule 2: Handler must accept the request positionally ---
    try:
        sig.bind(object())
    except TypeError as exc:
        raise TypeError(
            f"\n\nStrict-mode violation in handler {name!r} "
            f"[{method} {pattern}]\n"
            f"  Current: {name}{sig}\n"
            f"  Problem: Handler cannot be called with a single request argument ({exc}).\n"
            f"  Fix:     Define the handler as def {name.rpartition('.')[2]}(request): ...\n"
            f"  Rules:   Exactly one positional parameter; any others need defaults.\n"
        ) from None
