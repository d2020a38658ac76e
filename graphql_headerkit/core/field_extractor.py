"""
Root field extraction for a single operation block.

Three strategies of decreasing strictness are tried in order; the first one
that yields at least one field name wins and its result is returned as is.
"""

import logging
import re
from typing import Callable, List, Sequence, Tuple

from graphql_headerkit.core.keywords import is_excluded
from graphql_headerkit.core.scanner import mask_string_literals

logger = logging.getLogger(__name__)

RootFieldStrategy = Callable[[str], List[str]]

# Field (optionally with collapsed args and directives) owning a collapsed selection set
_SELECTION_FIELD_RE = re.compile(
    r"(?<![A-Za-z0-9_@$.])(@?[A-Za-z0-9_]+)\s*(?:\(\)\s*)?"
    r"(?:@[A-Za-z0-9_]+\s*(?:\(\)\s*)?)*\{\}"
)
_LEADING_FIELD_RE = re.compile(r"\s*(@?[A-Za-z0-9_]+)(?:\s*:\s*([A-Za-z0-9_]+))?")
_TOKEN_RE = re.compile(r"(@?[A-Za-z0-9_]+)(\s*:)?")


def collapse_nested(text: str, keep_markers: bool = True) -> str:
    """
    Reduce text to what sits at depth 0.

    Every ``{...}`` and ``(...)`` region is collapsed: to ``{}`` / ``()`` when
    ``keep_markers`` is set, to a single space otherwise. Braces inside an
    argument list belong to the argument list.
    """
    out = []
    depth = 0
    for char in text:
        if char in "{(":
            if depth == 0:
                out.append(char if keep_markers else " ")
            depth += 1
        elif char in "})":
            if depth > 0:
                depth -= 1
                if depth == 0 and keep_markers:
                    out.append(char)
        elif depth == 0:
            out.append(char)
    return "".join(out)


def strict_selection_fields(block: str) -> List[str]:
    """
    Root fields that carry their own selection set.

    ``user(id: 1) { name }`` yields ``user``; a leaf such as ``__typename``
    yields nothing. Aliases resolve to the underlying field.
    """
    skeleton = collapse_nested(block, keep_markers=True)
    return [
        match.group(1)
        for match in _SELECTION_FIELD_RE.finditer(skeleton)
        if not is_excluded(match.group(1))
    ]


def line_scan_fields(block: str) -> List[str]:
    """Leading identifier of every line that starts at depth 0."""
    fields = []
    depth = 0

    for line in block.split("\n"):
        if depth == 0:
            match = _LEADING_FIELD_RE.match(line)
            if match:
                name = match.group(2) or match.group(1)
                if not is_excluded(name):
                    fields.append(name)
        depth += line.count("{") - line.count("}")

    return fields


def depth_collapse_fields(block: str) -> List[str]:
    """Every identifier left once nested regions are collapsed away."""
    flat = collapse_nested(block, keep_markers=False)
    fields = []

    for match in _TOKEN_RE.finditer(flat):
        token, alias_colon = match.groups()
        if alias_colon or is_excluded(token):
            continue
        fields.append(token)

    return fields


ROOT_FIELD_STRATEGIES: Tuple[Tuple[str, RootFieldStrategy], ...] = (
    ("strict_selection", strict_selection_fields),
    ("line_scan", line_scan_fields),
    ("depth_collapse", depth_collapse_fields),
)


def extract_root_fields(
    block: str, strategies: Sequence[Tuple[str, RootFieldStrategy]] = ROOT_FIELD_STRATEGIES
) -> List[str]:
    """
    Extract depth-0 field names from the inner text of one operation block.

    String literals are masked first so their content never reaches a
    strategy.

    Examples:
        >>> extract_root_fields(' a { x } b(id: 1) { y } ')
        ['a', 'b']
        >>> extract_root_fields(' __typename ')
        ['__typename']
    """
    masked = mask_string_literals(block)

    for name, strategy in strategies:
        fields = strategy(masked)
        if fields:
            logger.debug(f"Root fields resolved by '{name}' strategy: {fields}")
            return fields

    return []
