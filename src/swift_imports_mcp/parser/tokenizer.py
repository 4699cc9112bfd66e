"""Syntax token stream from tree-sitter, shaped like a SourceKit syntax map."""

from tree_sitter_language_pack import get_parser

from .imports import ImportDeclaration, parse_import_declarations
from .languages import LanguageSpec, LANGUAGE_REGISTRY
from .tokens import SyntaxToken


def tokenize(content: str, language: str = "swift") -> list[SyntaxToken]:
    """Tokenize source code using tree-sitter.

    Only keywords, identifiers, attributes, literals and comments produce
    tokens. Punctuation and whitespace are left as gaps between tokens.

    Args:
        content: Raw source code
        language: Language name (must be in LANGUAGE_REGISTRY)

    Returns:
        List of SyntaxToken objects ordered by offset
    """
    if language not in LANGUAGE_REGISTRY:
        return []

    spec = LANGUAGE_REGISTRY[language]
    source_bytes = content.encode("utf-8")

    parser = get_parser(spec.ts_language)
    tree = parser.parse(source_bytes)

    tokens = []
    _walk_tree(tree.root_node, spec, tokens)

    return tokens


def _walk_tree(node, spec: LanguageSpec, tokens: list):
    """Recursively walk the syntax tree and emit leaf tokens."""
    # Zero-width nodes are inserted by error recovery
    if node.start_byte == node.end_byte:
        return

    if node.is_named and node.type in spec.token_node_types:
        tokens.append(_make_token(node, spec.token_node_types[node.type]))
        return

    if node.child_count == 0:
        if not node.is_named and spec.keyword_pattern.fullmatch(node.type):
            tokens.append(_make_token(node, spec.keyword_tag))
        return

    for child in node.children:
        _walk_tree(child, spec, tokens)


def _make_token(node, tag: str) -> SyntaxToken:
    return SyntaxToken(
        type=tag,
        offset=node.start_byte,
        length=node.end_byte - node.start_byte,
    )


def parse_file(content: str, language: str = "swift") -> list[ImportDeclaration]:
    """Tokenize a file and extract its import declarations."""
    return parse_import_declarations(content, tokenize(content, language))
