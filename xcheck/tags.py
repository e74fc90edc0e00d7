"""Verification tags reported alongside every cross-check value."""

from __future__ import annotations

from enum import IntEnum


class Tag(IntEnum):
    UNKNOWN = 0
    FUNCTION_ENTRY = 1
    FUNCTION_EXIT = 2
    FUNCTION_ARGUMENT = 3
    FUNCTION_RETURN = 4

    @property
    def runtime_name(self) -> str:
        """Name of the matching constant in the runtime library."""
        return _RUNTIME_NAMES[self]

    @classmethod
    def parse(cls, name: str) -> "Tag":
        """Look up a tag by its own name or its runtime constant name.

        Raises KeyError for anything else.
        """
        if name in cls.__members__:
            return cls[name]
        return _RUNTIME_ALIASES[name]


_RUNTIME_NAMES: dict[Tag, str] = {
    Tag.UNKNOWN: "UNKNOWN_TAG",
    Tag.FUNCTION_ENTRY: "FUNCTION_CALL_TAG",
    Tag.FUNCTION_EXIT: "FUNCTION_EXIT_TAG",
    Tag.FUNCTION_ARGUMENT: "FUNCTION_ARG_TAG",
    Tag.FUNCTION_RETURN: "FUNCTION_RETURN_TAG",
}

_RUNTIME_ALIASES: dict[str, Tag] = {v: k for k, v in _RUNTIME_NAMES.items()}
