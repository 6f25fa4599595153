"""
Token and Lookup Result Definitions

This module defines the two-variant result types used by the token reader
(``Ok`` / ``Err``) and by store lookups (``Present`` / ``Absent``), plus the
structured error describing why a token failed to decode.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union


class TokenErrorKind(Enum):
    """Which structural rule of the token stream was violated."""
    NO_NEWLINE = "no newline"
    NO_LENGTH = "no length"
    INSUFFICIENT_CONTENTS = "insufficient contents"


@dataclass(frozen=True)
class TokenError:
    """
    Describes a malformed token.

    Attributes:
        kind: The violated rule
        offset: Byte offset where the failing token starts
    """
    kind: TokenErrorKind
    offset: int = 0

    @property
    def message(self) -> str:
        """Human-readable description, as written to the log."""
        return f"Bad file: {self.kind.value}"

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class Ok:
    """A successfully decoded token (a zero-copy view of the input)."""
    token: memoryview

    @property
    def is_ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    """A token that failed to decode."""
    error: TokenError

    @property
    def is_ok(self) -> bool:
        return False


TokenResult = Union[Ok, Err]


@dataclass(frozen=True)
class Present:
    """A lookup that found a value."""
    value: str

    def __bool__(self) -> bool:
        return True


class Absent:
    """A lookup that found nothing. Use the ``ABSENT`` singleton."""

    _instance = None

    def __new__(cls) -> "Absent":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"


ABSENT = Absent()

Lookup = Union[Present, Absent]
