"""SQL parameter binding.

Statement builders emit Spanner's positional ``@p1, @p2, ...``
placeholders together with an ordered argument list. Spanner binds
parameters by name, so the list is turned into a ``{"p1": ..., "p2": ...}``
mapping and merged with any named arguments supplied by the caller.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from span_query.core.exceptions import ParameterBindingError

POSITIONAL_PREFIX = "p"


def positional_name(index: int) -> str:
    """Return the parameter name for the 0-based positional *index*."""
    return f"{POSITIONAL_PREFIX}{index + 1}"


def pairs_to_params(extra: Sequence[Any]) -> dict[str, Any]:
    """Convert a flat ``key, value, key, value`` sequence into a dict.

    Raises:
        ParameterBindingError: odd length or a non-string key.
    """
    if len(extra) % 2 != 0:
        raise ParameterBindingError(
            f"additional arguments must come in key/value pairs, got {len(extra)} items"
        )
    params: dict[str, Any] = {}
    for i in range(0, len(extra), 2):
        key = extra[i]
        if not isinstance(key, str):
            raise ParameterBindingError(
                f"additional argument key must be a string, got {type(key).__name__}"
            )
        params[key] = extra[i + 1]
    return params


def build_params(
    positional: Sequence[Any],
    extra: Sequence[Any] = (),
) -> dict[str, Any]:
    """Build the named parameter mapping for a statement.

    Args:
        positional: Builder arguments; bound as ``p1..pN`` in order.
        extra: Flat key/value pairs merged after the positional ones.

    Returns:
        Parameter mapping ready for ``execute_sql(params=...)``.

    Raises:
        ParameterBindingError: malformed *extra*, or an extra key that
            shadows a positional parameter.
    """
    params = {positional_name(i): arg for i, arg in enumerate(positional)}
    named = pairs_to_params(extra)

    collisions = sorted(params.keys() & named.keys())
    if collisions:
        raise ParameterBindingError(
            f"additional arguments collide with positional parameters: {collisions}"
        )

    params.update(named)
    return params
