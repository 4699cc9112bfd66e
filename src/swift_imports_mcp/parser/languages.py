"""Language registry with LanguageSpec definitions for tokenizing."""

import re
from dataclasses import dataclass

from .tokens import (
    ATTRIBUTE_BUILTIN,
    COMMENT,
    IDENTIFIER,
    KEYWORD,
    NUMBER,
    STRING,
    TYPE_IDENTIFIER,
)


@dataclass
class LanguageSpec:
    """Specification for turning a language's syntax tree into tokens."""
    # tree-sitter language name (for tree-sitter-language-pack)
    ts_language: str

    # Named node types emitted as a single token (children are not visited)
    # Maps node_type -> SourceKit token tag
    token_node_types: dict[str, str]

    # Anonymous nodes whose type matches this pattern are keywords
    keyword_pattern: re.Pattern

    # Tag given to keyword nodes
    keyword_tag: str = KEYWORD


# File extension to language mapping
LANGUAGE_EXTENSIONS = {
    ".swift": "swift",
}


# Swift specification
SWIFT_SPEC = LanguageSpec(
    ts_language="swift",
    token_node_types={
        "simple_identifier": IDENTIFIER,
        "type_identifier": TYPE_IDENTIFIER,
        "attribute": ATTRIBUTE_BUILTIN,
        "line_string_literal": STRING,
        "multi_line_string_literal": STRING,
        "raw_string_literal": STRING,
        "integer_literal": NUMBER,
        "real_literal": NUMBER,
        "hex_literal": NUMBER,
        "oct_literal": NUMBER,
        "bin_literal": NUMBER,
        "comment": COMMENT,
        "multiline_comment": COMMENT,
    },
    keyword_pattern=re.compile(r"#?[A-Za-z_]+"),
)


# Language registry
LANGUAGE_REGISTRY = {
    "swift": SWIFT_SPEC,
}
