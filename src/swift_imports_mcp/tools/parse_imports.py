"""Parse the imports of source text passed in directly."""

from typing import Optional

from ..parser import (
    ImportDeclarationsParser,
    InvalidTokenBoundsError,
    tokenize,
    tokens_from_json,
)


def parse_imports(contents: str, tokens: Optional[list[dict]] = None) -> dict:
    """Extract import declarations from Swift source.

    Args:
        contents: Source text
        tokens: Optional SourceKit syntax tokens ({"type", "offset", "length"}).
            When omitted the text is tokenized with tree-sitter.

    Returns:
        Dict with declarations and their canonical descriptions
    """
    try:
        syntax_tokens = tokens_from_json(tokens) if tokens is not None else tokenize(contents)
        parser = ImportDeclarationsParser(contents, syntax_tokens)
    except InvalidTokenBoundsError as e:
        return {"error": f"Invalid token bounds: {e}"}

    return {
        "import_count": len(parser.declarations),
        "imports": [d.to_dict() for d in parser.declarations],
        "descriptions": parser.declarations_descriptions,
    }
