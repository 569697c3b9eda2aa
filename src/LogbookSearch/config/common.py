"""Typed option reading shared by the config section loaders.

Every LogbookSearch option has a built-in default, so sections and keys may
be omitted; only the type of a present value and the section shape are
enforced here. Errors name the full ``section.key`` path.
"""

from __future__ import annotations

from typing import Any, Mapping

_KIND_NAMES = {str: "a string", bool: "a boolean", int: "an integer", float: "a number"}


def get_section(raw: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    """Return section ``name`` of the root config, empty when absent.

    Raises:
        TypeError: If the section is present but not a mapping.
    """
    section = raw.get(name)
    if section is None:
        return {}
    if not isinstance(section, Mapping):
        raise TypeError(f"{name} must be an object")
    return section


def read_option(section: Mapping[str, Any], path: str, default: Any, kind: type) -> Any:
    """Read ``path`` (``section.key``) from its section, checking its type.

    ``bool`` never passes as ``int``/``float``; ``int`` values are widened
    when ``kind`` is ``float``.

    Raises:
        TypeError: If the value does not have the expected kind.
    """
    value = section.get(path.rsplit(".", 1)[-1], default)
    if kind is not bool and isinstance(value, bool):
        raise TypeError(f"{path} must be {_KIND_NAMES[kind]}")
    if kind is float and isinstance(value, int):
        return float(value)
    if not isinstance(value, kind):
        raise TypeError(f"{path} must be {_KIND_NAMES[kind]}")
    return value


def check_non_empty(value: str, path: str) -> None:
    if not value.strip():
        raise ValueError(f"{path} must not be empty")


def check_positive(value: float, path: str) -> None:
    if value <= 0:
        raise ValueError(f"{path} must be positive")
