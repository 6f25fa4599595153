"""Protocol module for flushkv."""

from .parser import ByteView, ContentsParser, format_token, get_token
from .results import (
    ABSENT,
    Absent,
    Err,
    Lookup,
    Ok,
    Present,
    TokenError,
    TokenErrorKind,
    TokenResult,
)

__all__ = [
    "ABSENT",
    "Absent",
    "ByteView",
    "ContentsParser",
    "Err",
    "Lookup",
    "Ok",
    "Present",
    "TokenError",
    "TokenErrorKind",
    "TokenResult",
    "format_token",
    "get_token",
]
