"""Parser package for extracting import declarations from Swift source."""

from .tokens import (
    SyntaxToken,
    ContentToken,
    InvalidTokenBoundsError,
    KEYWORD,
    IDENTIFIER,
    project_tokens,
    tokens_from_json,
)
from .imports import (
    Attribute,
    DeclarationKind,
    ImportDeclaration,
    ImportDeclarationsParser,
    parse_import_declarations,
)
from .languages import LanguageSpec, LANGUAGE_REGISTRY, LANGUAGE_EXTENSIONS, SWIFT_SPEC
from .tokenizer import tokenize, parse_file

__all__ = [
    "SyntaxToken",
    "ContentToken",
    "InvalidTokenBoundsError",
    "KEYWORD",
    "IDENTIFIER",
    "project_tokens",
    "tokens_from_json",
    "Attribute",
    "DeclarationKind",
    "ImportDeclaration",
    "ImportDeclarationsParser",
    "parse_import_declarations",
    "LanguageSpec",
    "LANGUAGE_REGISTRY",
    "LANGUAGE_EXTENSIONS",
    "SWIFT_SPEC",
    "tokenize",
    "parse_file",
]
