"""Errors raised while compiling search parameters."""

from __future__ import annotations


class MalformedInputError(ValueError):
    """A load-bearing search parameter could not be parsed.

    Compilation is aborted; callers should report it as a client error.

    Attributes:
        key: Normalized parameter key.
        value: Offending raw value.
    """

    def __init__(self, key: str, value: str, reason: str) -> None:
        super().__init__(f"Malformed search parameter {key}={value!r}: {reason}")
        self.key = key
        self.value = value
