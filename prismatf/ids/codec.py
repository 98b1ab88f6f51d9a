"""Composite resource identifiers.

Several values (for an RQL search: the search type, the query text and the
server-issued search id) have to be recoverable from the single string a
resource is keyed by. The payload starts with the part count as
``<count>:``, followed by each part as ``<byte length>:<utf-8 bytes>``, and
the whole payload is base64 encoded, so parts may hold any text, including
the empty string and characters such as ``:`` or newlines.
"""

import base64
import binascii
from typing import List, Optional, Sequence, Tuple

from prismatf.core.exceptions import MalformedIdentifierError

_LENGTH_SEPARATOR = b":"


def _read_number(token: str, payload: bytes, pos: int, what: str) -> Tuple[int, int]:
    """Read a ``<digits>:`` field at ``pos``; return (value, offset after ':')."""
    sep = payload.find(_LENGTH_SEPARATOR, pos)
    if sep == -1:
        raise MalformedIdentifierError(token, f"missing {what}")

    digits = payload[pos:sep]
    if not digits.isdigit() or (len(digits) > 1 and digits[:1] == b"0"):
        raise MalformedIdentifierError(token, f"bad {what} at offset {pos}")

    return int(digits), sep + 1


class CompositeIdCodec:
    """Encode an ordered tuple of strings into one opaque token and back."""

    def encode(self, parts: Sequence[str]) -> str:
        """Pack ``parts`` into a token.

        Args:
            parts: Ordered string parts

        Returns:
            URL-safe base64 token
        """
        payload = bytearray(str(len(parts)).encode("ascii") + _LENGTH_SEPARATOR)
        for part in parts:
            if not isinstance(part, str):
                raise TypeError(
                    f"Identifier parts must be str, got {type(part).__name__}"
                )
            raw = part.encode("utf-8")
            payload += str(len(raw)).encode("ascii")
            payload += _LENGTH_SEPARATOR
            payload += raw

        return base64.urlsafe_b64encode(bytes(payload)).decode("ascii")

    def decode(self, token: str, expected_parts: Optional[int] = None) -> List[str]:
        """Unpack a token produced by :meth:`encode`.

        Only the exact string ``encode`` would produce for the decoded parts
        is accepted, so truncated tokens, standard-alphabet base64 and
        non-zero padding bits are all rejected.

        Args:
            token: Identifier to decode
            expected_parts: Arity the caller requires, if any

        Returns:
            The original parts, in order

        Raises:
            MalformedIdentifierError: If the token was not produced by ``encode``
        """
        try:
            payload = base64.b64decode(token, altchars=b"-_", validate=True)
        except (binascii.Error, ValueError) as e:
            raise MalformedIdentifierError(token, f"invalid base64 ({e})") from e

        count, pos = _read_number(token, payload, 0, "part count")

        parts: List[str] = []
        while len(parts) < count:
            if pos >= len(payload):
                raise MalformedIdentifierError(
                    token, f"expected {count} parts, payload ends after {len(parts)}"
                )

            length, start = _read_number(token, payload, pos, "length prefix")
            end = start + length
            if end > len(payload):
                raise MalformedIdentifierError(token, "truncated part")

            try:
                parts.append(payload[start:end].decode("utf-8"))
            except UnicodeDecodeError as e:
                raise MalformedIdentifierError(token, "part is not valid UTF-8") from e
            pos = end

        if pos != len(payload):
            raise MalformedIdentifierError(token, f"trailing data at offset {pos}")

        if self.encode(parts) != token:
            raise MalformedIdentifierError(token, "non-canonical encoding")

        if expected_parts is not None and len(parts) != expected_parts:
            raise MalformedIdentifierError(
                token, f"expected {expected_parts} parts, found {len(parts)}"
            )

        return parts


_codec = CompositeIdCodec()


def encode(parts: Sequence[str]) -> str:
    """Pack ``parts`` into a single identifier."""
    return _codec.encode(parts)


def decode(token: str, expected_parts: Optional[int] = None) -> List[str]:
    """Unpack an identifier produced by :func:`encode`."""
    return _codec.decode(token, expected_parts)


def build_rql_search_id(search_type: str, query: str, search_id: str) -> str:
    """Identifier for a saved RQL search."""
    return encode([search_type, query, search_id])


def parse_rql_search_id(token: str) -> Tuple[str, str, str]:
    """Split an RQL search identifier into (search_type, query, search_id)."""
    search_type, query, search_id = decode(token, expected_parts=3)
    return search_type, query, search_id
