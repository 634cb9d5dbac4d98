"""Remote search backend registry.

Built-in backends register themselves when their module is imported;
``get_backend`` imports the module on first use so callers only need a
name from settings.
"""

from __future__ import annotations

import importlib
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cinelink_search.contracts import SearchBackend

_BUILTIN_MODULES = {
    "omdb": "cinelink_search.backends.omdb",
    "cinelink": "cinelink_search.backends.cinelink",
}

_REGISTRY: dict[str, type] = {}


def register_backend(name: str, cls: type) -> None:
    _REGISTRY[name] = cls


def get_backend(name: str, **kwargs) -> "SearchBackend":
    """Instantiate the backend registered under ``name``."""
    if name not in _REGISTRY and name in _BUILTIN_MODULES:
        importlib.import_module(_BUILTIN_MODULES[name])
    if name not in _REGISTRY:
        known = sorted({*_REGISTRY, *_BUILTIN_MODULES})
        raise KeyError(f"Unknown search backend {name!r}. Known: {', '.join(known)}")
    return _REGISTRY[name](**kwargs)


def available_backends() -> list[str]:
    """Names of all backends that ``get_backend`` can build."""
    return sorted({*_REGISTRY, *_BUILTIN_MODULES})
