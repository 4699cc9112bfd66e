"""Syntax tokens and their projection onto source text."""

from dataclasses import dataclass
from typing import Iterable


# SourceKit syntax map tags
KEYWORD = "source.lang.swift.syntaxtype.keyword"
IDENTIFIER = "source.lang.swift.syntaxtype.identifier"
TYPE_IDENTIFIER = "source.lang.swift.syntaxtype.typeidentifier"
ATTRIBUTE_BUILTIN = "source.lang.swift.syntaxtype.attribute.builtin"
STRING = "source.lang.swift.syntaxtype.string"
NUMBER = "source.lang.swift.syntaxtype.number"
COMMENT = "source.lang.swift.syntaxtype.comment"

# Short tags accepted from callers that don't speak SourceKit
TAG_ALIASES = {
    "keyword": KEYWORD,
    "identifier": IDENTIFIER,
}


class InvalidTokenBoundsError(ValueError):
    """A token's byte range does not address valid text."""


@dataclass(frozen=True)
class SyntaxToken:
    """A classified byte span of source text produced by a lexer."""
    type: str       # SourceKit tag, e.g. "source.lang.swift.syntaxtype.keyword"
    offset: int     # Start byte in UTF-8 encoded source
    length: int     # Byte length

    @property
    def end(self) -> int:
        return self.offset + self.length

    def is_kind(self, tag: str) -> bool:
        """Check the token tag, accepting short aliases."""
        return TAG_ALIASES.get(self.type, self.type) == tag


@dataclass(frozen=True)
class ContentToken:
    """A token paired with its exact substring of the source."""
    token: SyntaxToken
    content: str


def project_tokens(contents: str, tokens: Iterable[SyntaxToken]) -> list[ContentToken]:
    """Order tokens by offset and attach the text each one covers.

    Offsets and lengths are byte units into the UTF-8 encoding of
    ``contents``. Equal offsets keep their input order.

    Raises:
        InvalidTokenBoundsError: If a range is negative, runs past the end
            of the text, or splits a multi-byte character.
    """
    source_bytes = contents.encode("utf-8")
    ordered = sorted(tokens, key=lambda t: t.offset)

    projected = []
    for token in ordered:
        if token.offset < 0 or token.length < 0 or token.end > len(source_bytes):
            raise InvalidTokenBoundsError(
                f"Token {token.type} [{token.offset}, {token.end}) is outside "
                f"source of {len(source_bytes)} bytes"
            )
        try:
            content = source_bytes[token.offset:token.end].decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidTokenBoundsError(
                f"Token {token.type} [{token.offset}, {token.end}) splits a character"
            ) from e
        projected.append(ContentToken(token=token, content=content))

    return projected


def tokens_from_json(items: Iterable[dict]) -> list[SyntaxToken]:
    """Build tokens from SourceKit-style dicts (``sourcekitten syntax`` output).

    Each item needs ``type``, ``offset`` and ``length`` keys.
    """
    tokens = []
    for item in items:
        try:
            token_type = item["type"]
            offset = item["offset"]
            length = item["length"]
        except (KeyError, TypeError) as e:
            raise InvalidTokenBoundsError(f"Malformed token: {item!r}") from e

        # bool is an int subclass, reject it explicitly
        if not all(isinstance(v, int) and not isinstance(v, bool) for v in (offset, length)):
            raise InvalidTokenBoundsError(f"Non-integer token bounds: {item!r}")

        tokens.append(SyntaxToken(type=str(token_type), offset=offset, length=length))

    return tokens
