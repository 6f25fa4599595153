"""
Contents Parser Module

This module decodes and encodes the persisted form of a store.

Wire Format:
    Each key/value pair is written as two length-prefixed tokens:

        <len(key)>\\n<key bytes><len(value)>\\n<value bytes>

    Lengths are ASCII decimal byte counts. There is no delimiter after a
    payload; the next token's length digits follow immediately. An empty
    buffer is an empty store.
"""

import logging
from typing import Mapping, MutableMapping, Optional, Union

from .results import Err, Ok, TokenError, TokenErrorKind, TokenResult

logger = logging.getLogger(__name__)

# Payloads decode with surrogateescape so any bytes read from a sink load as
# a str and write back byte-identical. Text supplied by callers must be
# strict UTF-8 (see validate_text), so it never collides with those escapes.
ENCODING = "utf-8"
ENCODING_ERRORS = "surrogateescape"

MAX_TOKEN_LENGTH = 2 ** 64 - 1
MAX_LENGTH_DIGITS = len(str(MAX_TOKEN_LENGTH))

BytesLike = Union[bytes, bytearray, memoryview]


class ByteView:
    """
    A read cursor over a byte buffer.

    get_token() advances the cursor past each token it decodes. For bytes
    and bytearray input, tokens are memoryview slices of the caller's
    buffer, so reading does not copy payload bytes. Other buffers (such as
    a memoryview) are copied into bytes once, up front.

    The buffer must not be modified while the view or its tokens are in use.

    Attributes:
        offset: Index of the next unread byte
    """

    def __init__(self, data: BytesLike):
        self._data = data if isinstance(data, (bytes, bytearray)) else bytes(data)
        self._view = memoryview(self._data)
        self.offset = 0

    @property
    def remaining(self) -> int:
        """Number of unread bytes."""
        return len(self._data) - self.offset

    @property
    def empty(self) -> bool:
        return self.offset >= len(self._data)

    def find(self, sub: bytes) -> int:
        return self._data.find(sub, self.offset)

    def slice(self, start: int, end: int) -> memoryview:
        return self._view[start:end]


def get_token(view: ByteView) -> TokenResult:
    """
    Remove the next length-prefixed token from the view.

    Args:
        view: Cursor positioned at the start of a token

    Returns:
        Ok(token) with the payload bytes, the view advanced past them.
        Err(error) if the token is malformed; the view is not advanced.

    Examples:
        >>> view = ByteView(b"3\\nabc")
        >>> bytes(get_token(view).token)
        b'abc'
        >>> view.empty
        True
    """
    start = view.offset
    newline = view.find(b"\n")
    if newline < 0:
        return Err(TokenError(TokenErrorKind.NO_NEWLINE, start))

    length_field = view.slice(start, newline).tobytes()
    # bytes.isdigit() only accepts ASCII digits and rejects b""
    if not length_field.isdigit():
        return Err(TokenError(TokenErrorKind.NO_LENGTH, start))
    # Bound the digit count before int(), which refuses very long strings
    significant = length_field.lstrip(b"0")
    if len(significant) > MAX_LENGTH_DIGITS:
        return Err(TokenError(TokenErrorKind.NO_LENGTH, start))
    length = int(significant or b"0")
    if length > MAX_TOKEN_LENGTH:
        return Err(TokenError(TokenErrorKind.NO_LENGTH, start))

    payload_start = newline + 1
    if view.remaining - (payload_start - start) < length:
        return Err(TokenError(TokenErrorKind.INSUFFICIENT_CONTENTS, start))

    view.offset = payload_start + length
    return Ok(view.slice(payload_start, view.offset))


def format_token(payload: bytes) -> bytes:
    """Encode one payload as a length-prefixed token."""
    return b"%d\n" % len(payload) + payload


def decode_text(token: BytesLike) -> str:
    return str(token, ENCODING, ENCODING_ERRORS)


def encode_text(text: str) -> bytes:
    return text.encode(ENCODING, ENCODING_ERRORS)


def validate_text(text: str) -> None:
    """
    Check that caller-supplied text survives a flush and reload unchanged.

    Lone surrogates are rejected: they either cannot be encoded at all, or
    would be written as raw bytes that load back as a different string.

    Raises:
        ValueError: If text is not valid Unicode text for UTF-8
    """
    try:
        text.encode(ENCODING)
    except UnicodeEncodeError as exc:
        raise ValueError(f"Text is not encodable as {ENCODING}: {text!r}") from exc


class ContentsParser:
    """
    Decoder/encoder for serialized store contents.

    Parsing is best effort: pairs are inserted into the target as they are
    decoded, and a failure part way through leaves the earlier pairs in
    place. The reason for the most recent failure is kept in last_error.

    Usage:
        parser = ContentsParser()
        store = {}
        if not parser.parse_contents(data, store):
            print(parser.last_error.message)
        data = parser.format_contents(store)
    """

    def __init__(self):
        self.last_error: Optional[TokenError] = None

    def parse_contents(self, contents: BytesLike, target: MutableMapping[str, str]) -> bool:
        """
        Decode contents into target.

        Args:
            contents: Serialized store bytes
            target: Mapping that receives each decoded pair; an existing
                value for the same key is overwritten

        Returns:
            True if the whole buffer decoded, False at the first malformed
            token. Pairs decoded before the failure are not rolled back.
        """
        self.last_error = None
        view = ByteView(contents)

        while not view.empty:
            key = get_token(view)
            if not key.is_ok:
                return self._fail(key.error)
            value = get_token(view)
            if not value.is_ok:
                return self._fail(value.error)
            target[decode_text(key.token)] = decode_text(value.token)

        return True

    def _fail(self, error: TokenError) -> bool:
        self.last_error = error
        logger.warning(f"{error.message} (offset {error.offset})")
        return False

    def format_contents(self, mapping: Mapping[str, str]) -> bytes:
        """
        Serialize a mapping into the wire format.

        Examples:
            >>> ContentsParser().format_contents({"A": "B"})
            b'1\\nA1\\nB'
        """
        parts = []
        for key, value in mapping.items():
            parts.append(format_token(encode_text(key)))
            parts.append(format_token(encode_text(value)))
        return b"".join(parts)
