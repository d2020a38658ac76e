"""
Lexical scanning of raw GraphQL documents.

Tolerant, regex-assisted scanner used to isolate top-level operation blocks
without a full GraphQL parser:

- Comment stripping (``#`` to end of line)
- Whitespace normalization
- String-aware brace balancing (explicit NORMAL / IN_STRING / ESCAPED machine)
- Discovery of ``query`` / ``mutation`` blocks, named or anonymous

Nothing here raises on malformed input. "Not found" is always reported as an
empty result.
"""

import logging
import re
from bisect import bisect_left
from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)

_COMMENT_RE = re.compile(r"#[^\n]*")

# Keyword preceded by "$" or "@" is a variable or directive, never an operation.
_OPERATION_KEYWORD_RE = re.compile(r"(?<![$@])\b(query|mutation)\b", re.IGNORECASE)
_OPERATION_NAME_RE = re.compile(r"\s*(?:[A-Za-z_][A-Za-z0-9_]*)?\s*")
_DIRECTIVES_RE = re.compile(r"(?:\s*@[A-Za-z_][A-Za-z0-9_]*(?:\s*\([^()]*\))?)*\s*")


class OperationKind(str, Enum):
    """Operation types the locator scans for."""

    QUERY = "query"
    MUTATION = "mutation"


class ScanState(Enum):
    """States of the string-aware character scanner."""

    NORMAL = "normal"
    IN_STRING = "in_string"
    ESCAPED = "escaped"


def next_state(state: ScanState, char: str) -> ScanState:
    """
    Transition function of the scanner.

    A backslash only escapes inside a string literal; the escaped character
    always drops back to IN_STRING, whatever it is.
    """
    if state is ScanState.ESCAPED:
        return ScanState.IN_STRING
    if state is ScanState.IN_STRING:
        if char == "\\":
            return ScanState.ESCAPED
        if char == '"':
            return ScanState.NORMAL
        return ScanState.IN_STRING
    if char == '"':
        return ScanState.IN_STRING
    return ScanState.NORMAL


def strip_comments(text: str) -> str:
    """
    Remove ``#`` line comments, keeping the line breaks.

    String literals are not special-cased: a ``#`` inside quotes also starts
    a comment.
    """
    return _COMMENT_RE.sub("", text)


def normalize_whitespace(text: str) -> str:
    """Collapse whitespace runs to a single space and trim both ends."""
    return " ".join(text.split())


def mask_string_literals(text: str) -> str:
    """
    Blank out string literals (quotes included) with spaces.

    Offsets are preserved, so matches found on the masked text can be used
    directly against the unmasked text.
    """
    chars = list(text)
    state = ScanState.NORMAL
    for index, char in enumerate(text):
        new_state = next_state(state, char)
        if state is not ScanState.NORMAL or new_state is not ScanState.NORMAL:
            chars[index] = " "
        state = new_state
    return "".join(chars)


class BraceBalancer:
    """
    Locates the balanced ``{ ... }`` block starting at or after an offset.

    Braces only affect the nesting counter in the NORMAL state, so braces
    inside string literals (escaped quotes included) are ignored.

    Examples:
        >>> BraceBalancer('q { a(s: "}") { b } }').balance(0)
        ' a(s: "}") { b } '
    """

    def __init__(self, text: str):
        self.text = text

    def find_span(self, offset: int = 0) -> Optional[Tuple[int, int]]:
        """
        Returns:
            (open_index, close_index) of the outer braces, or None if there is
            no ``{`` at/after ``offset`` or the block never closes.
        """
        start = self.text.find("{", max(offset, 0))
        if start < 0:
            return None

        depth = 0
        state = ScanState.NORMAL
        for index in range(start, len(self.text)):
            char = self.text[index]
            if state is ScanState.NORMAL:
                if char == "{":
                    depth += 1
                elif char == "}":
                    depth -= 1
                    if depth == 0:
                        return start, index
            state = next_state(state, char)

        return None

    def balance(self, offset: int = 0) -> str:
        """Inner text of the block (outer braces excluded), or "" when unbalanced."""
        span = self.find_span(offset)
        if span is None:
            return ""
        start, end = span
        return self.text[start + 1 : end]


def balance_block(text: str, offset: int = 0) -> str:
    """Convenience wrapper around BraceBalancer.balance()."""
    return BraceBalancer(text).balance(offset)


def iter_top_level_spans(masked: str) -> Iterator[Tuple[int, int]]:
    """
    Yield (open, close) spans of every depth-0 brace block.

    Expects text whose string literals are already masked. Stray closing
    braces are ignored; an unterminated trailing block yields nothing.
    """
    depth = 0
    start = 0
    for index, char in enumerate(masked):
        if char == "{":
            if depth == 0:
                start = index
            depth += 1
        elif char == "}" and depth > 0:
            depth -= 1
            if depth == 0:
                yield start, index


def match_pairs(masked: str, opener: str, closer: str) -> Dict[int, int]:
    """
    Map every ``opener`` index to the index of its matching ``closer``.

    Single stack pass over text whose string literals are already masked.
    Unclosed openers are absent from the result; stray closers are ignored.
    """
    pairs: Dict[int, int] = {}
    stack: List[int] = []
    for index, char in enumerate(masked):
        if char == opener:
            stack.append(index)
        elif char == closer and stack:
            pairs[stack.pop()] = index
    return pairs


def _header_end(masked: str, position: int, parens: Dict[int, int]) -> Optional[int]:
    """
    Skip ``Name($vars) @directives`` after an operation keyword.

    Returns the index of the selection-set ``{`` or None if the keyword is not
    followed by an operation header.
    """
    position = _OPERATION_NAME_RE.match(masked, position).end()

    if position < len(masked) and masked[position] == "(":
        close = parens.get(position)
        if close is None:
            return None
        position = close + 1

    position = _DIRECTIVES_RE.match(masked, position).end()

    if position < len(masked) and masked[position] == "{":
        return position
    return None


def _inside_spans(position: int, starts: List[int], spans: List[Tuple[int, int]]) -> bool:
    slot = bisect_left(starts, position) - 1
    return slot >= 0 and position < spans[slot][1]


def locate_operation_blocks(
    text: str, kind: OperationKind, allow_anonymous: bool = True
) -> List[str]:
    """
    Find the inner text of every top-level operation block of ``kind``.

    Args:
        text: Document text (comments already stripped)
        kind: OperationKind.QUERY or OperationKind.MUTATION
        allow_anonymous: Treat a document starting with ``{`` as a query when
            no ``query`` keyword block was found. Ignored for mutations.

    Returns:
        Whitespace-normalized block contents, in document order.
    """
    normalized = normalize_whitespace(text)
    if "{" not in normalized:
        return []

    masked = mask_string_literals(normalized)
    top_level = list(iter_top_level_spans(masked))
    top_level_starts = [start for start, _ in top_level]
    parens = match_pairs(masked, "(", ")")
    braces = match_pairs(masked, "{", "}")
    blocks: List[str] = []

    # Candidates of both kinds are walked together so that an operation named
    # after a keyword ("query mutation { ... }") is consumed by its header.
    header_limit = 0
    for match in _OPERATION_KEYWORD_RE.finditer(masked):
        if match.start() < header_limit:
            continue

        # Keyword used as a field/argument name inside another operation
        if _inside_spans(match.start(), top_level_starts, top_level):
            continue

        brace = _header_end(masked, match.end(), parens)
        if brace is None:
            continue
        header_limit = brace

        if match.group(1).lower() != kind.value:
            continue

        close = braces.get(brace)
        if close is None:
            continue
        block = normalized[brace + 1 : close]
        if block.strip():
            blocks.append(block)

    if kind is OperationKind.QUERY and allow_anonymous and not blocks:
        if normalized.startswith("{"):
            block = BraceBalancer(normalized).balance(0)
            if block.strip():
                logger.debug("Anonymous query block detected")
                blocks.append(block)

    return blocks
