"""Request context lookup.

A request context is any object values can be read from by name: a mapping
(looked up by key) or an object (looked up by attribute, methods are called).
Missing names resolve to None.
"""

import inspect
from collections.abc import Iterable, Mapping
from typing import Any


def lookup(request: Any, name: str) -> Any:
    """Return the value named ``name`` from the request, or None."""
    if request is None:
        return None
    if isinstance(request, Mapping):
        return request.get(name)
    value = getattr(request, name, None)
    if inspect.ismethod(value):
        return value()
    return value


def extract(request: Any, names: Iterable[str]) -> dict[str, Any]:
    """Look up every name, in order."""
    return {name: lookup(request, name) for name in names}
