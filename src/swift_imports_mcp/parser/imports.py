"""Import declaration scanner over a flat syntax token stream.

Recognizes ``[attribute] import [kind] path`` wherever an ``import`` keyword
token appears. Grammar reference:
https://docs.swift.org/swift-book/ReferenceManual/Declarations.html#grammar_import-declaration
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Optional

from .tokens import IDENTIFIER, KEYWORD, ContentToken, SyntaxToken, project_tokens


IMPORT_KEYWORD = "import"


class Attribute(str, Enum):
    """Modifier attribute written before ``import``."""
    NONE = "none"
    TESTABLE = "@testable"


class DeclarationKind(str, Enum):
    """Declaration-kind qualifier written after ``import``."""
    TYPEALIAS = "typealias"
    STRUCT = "struct"
    CLASS = "class"
    ENUM = "enum"
    PROTOCOL = "protocol"
    LET = "let"
    VAR = "var"
    FUNC = "func"


# Literal token text -> variant
ATTRIBUTE_MARKERS = MappingProxyType({"@testable": Attribute.TESTABLE})
DECLARATION_KINDS = MappingProxyType({k.value: k for k in DeclarationKind})


@dataclass(frozen=True)
class ImportDeclaration:
    """One parsed import declaration."""
    attribute: Attribute = Attribute.NONE
    kind: Optional[DeclarationKind] = None
    path: tuple[str, ...] = ()

    @property
    def module(self) -> str:
        """Top-level module name, or "" for an empty path."""
        return self.path[0] if self.path else ""

    def render(self) -> str:
        """Canonical single-space rendering, e.g. ``@testable import func A.b``."""
        components = []
        if self.attribute == Attribute.TESTABLE:
            components.append(self.attribute.value)
        components.append(IMPORT_KEYWORD)
        if self.kind is not None:
            components.append(self.kind.value)
        components.append(".".join(self.path))
        return " ".join(components)

    def __str__(self) -> str:
        return self.render()

    def to_dict(self) -> dict:
        return {
            "attribute": self.attribute.value,
            "kind": self.kind.value if self.kind else None,
            "path": list(self.path),
            "description": self.render(),
        }

    @classmethod
    def from_dict(cls, d: dict) -> "ImportDeclaration":
        kind = d.get("kind")
        return cls(
            attribute=Attribute(d.get("attribute", Attribute.NONE.value)),
            kind=DeclarationKind(kind) if kind else None,
            path=tuple(d.get("path", [])),
        )


def parse_import_declarations(
    contents: str,
    tokens: Iterable[SyntaxToken],
) -> list[ImportDeclaration]:
    """Extract import declarations in the order their ``import`` tokens occur.

    Args:
        contents: Raw source text the tokens point into
        tokens: Syntax tokens in any order

    Returns:
        List of ImportDeclaration objects. A declaration whose path could not
        be read (e.g. ``import`` at end of file) has an empty path.

    Raises:
        InvalidTokenBoundsError: If a token range does not address the text.
    """
    source_bytes = contents.encode("utf-8")
    projected = project_tokens(contents, tokens)
    count = len(projected)

    declarations = []
    # Lookahead below never moves this cursor; every position is visited.
    for idx in range(count):
        current = projected[idx]
        if not current.token.is_kind(KEYWORD) or current.content != IMPORT_KEYWORD:
            continue

        # Any token kind counts as a marker, only its text matters
        attribute = Attribute.NONE
        if idx > 0:
            attribute = ATTRIBUTE_MARKERS.get(projected[idx - 1].content, Attribute.NONE)

        cursor = idx + 1
        kind = None
        if cursor < count:
            kind = DECLARATION_KINDS.get(projected[cursor].content)
            if kind is not None:
                cursor += 1

        path = _scan_path(projected, cursor, source_bytes)
        declarations.append(ImportDeclaration(attribute=attribute, kind=kind, path=path))

    return declarations


def _scan_path(projected: list[ContentToken], cursor: int, source_bytes: bytes) -> tuple[str, ...]:
    """Collect identifiers joined by a single '.' byte, starting at cursor."""
    segments = []
    while cursor < len(projected):
        current = projected[cursor]
        if not current.token.is_kind(IDENTIFIER):
            break
        segments.append(current.content)

        if cursor + 1 >= len(projected):
            break
        following = projected[cursor + 1].token
        gap_start = current.token.end
        if following.offset - gap_start != 1:
            break
        if source_bytes[gap_start:following.offset] != b".":
            break
        cursor += 1

    return tuple(segments)


class ImportDeclarationsParser:
    """Parses a file's imports once and keeps the results."""

    def __init__(self, contents: str, tokens: Iterable[SyntaxToken]):
        self.contents = contents
        self.declarations = parse_import_declarations(contents, tokens)

    @property
    def declarations_descriptions(self) -> list[str]:
        return [d.render() for d in self.declarations]
