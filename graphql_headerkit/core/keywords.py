"""
Reserved GraphQL words that never count as resource names.
"""

from typing import FrozenSet

GRAPHQL_KEYWORDS: FrozenSet[str] = frozenset(
    {
        # Operations & fragments
        "query",
        "mutation",
        "subscription",
        "fragment",
        "on",
        # Literals
        "true",
        "false",
        "null",
        # Type system
        "type",
        "input",
        "interface",
        "union",
        "enum",
        "scalar",
        "schema",
        "extend",
        "implements",
        "directive",
    }
)


def is_keyword(word: str) -> bool:
    """Case-insensitive membership check against GRAPHQL_KEYWORDS."""
    return word.lower() in GRAPHQL_KEYWORDS


def is_excluded(token: str) -> bool:
    """
    Check if a token must be dropped from field-name results.

    Directive references (``@include``, ``@skip``...) are always excluded,
    whatever follows the ``@``.
    """
    return not token or token.startswith("@") or is_keyword(token)
