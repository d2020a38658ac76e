"""Tests for comment stripping, brace balancing and operation block discovery."""

from __future__ import annotations

import time

import pytest

from graphql_headerkit.core.scanner import (
    BraceBalancer,
    OperationKind,
    ScanState,
    balance_block,
    iter_top_level_spans,
    locate_operation_blocks,
    mask_string_literals,
    match_pairs,
    next_state,
    normalize_whitespace,
    strip_comments,
)


class TestStripComments:
    def test_removes_comment_to_end_of_line(self) -> None:
        assert strip_comments("query { a # trailing\n b }") == "query { a \n b }"

    def test_full_line_comment(self) -> None:
        assert strip_comments("# header\nquery { a }") == "\nquery { a }"

    def test_hash_inside_string_still_starts_a_comment(self) -> None:
        assert strip_comments('{ a(s: "#x") }') == '{ a(s: "'

    def test_no_comment_is_untouched(self) -> None:
        assert strip_comments("{ a }") == "{ a }"


class TestNormalizeWhitespace:
    def test_collapses_and_trims(self) -> None:
        assert normalize_whitespace("  query\n\t{   a\n}  ") == "query { a }"

    def test_empty(self) -> None:
        assert normalize_whitespace(" \n ") == ""


class TestScanStateMachine:
    def test_quote_enters_and_leaves_string(self) -> None:
        assert next_state(ScanState.NORMAL, '"') is ScanState.IN_STRING
        assert next_state(ScanState.IN_STRING, '"') is ScanState.NORMAL

    def test_backslash_escapes_next_character_only(self) -> None:
        assert next_state(ScanState.IN_STRING, "\\") is ScanState.ESCAPED
        assert next_state(ScanState.ESCAPED, '"') is ScanState.IN_STRING
        assert next_state(ScanState.ESCAPED, "\\") is ScanState.IN_STRING

    def test_backslash_outside_string_is_plain(self) -> None:
        assert next_state(ScanState.NORMAL, "\\") is ScanState.NORMAL

    def test_mask_string_literals_keeps_offsets(self) -> None:
        masked = mask_string_literals('a "b{" c')
        assert masked == "a" + " " * 6 + "c"

    def test_mask_handles_escaped_quote(self) -> None:
        masked = mask_string_literals(r'x "a\"}" y')
        assert masked.split() == ["x", "y"]
        assert len(masked) == len(r'x "a\"}" y')


class TestBraceBalancer:
    def test_returns_inner_text(self) -> None:
        assert BraceBalancer("x { a { b } } y").balance() == " a { b } "

    def test_find_span(self) -> None:
        assert BraceBalancer("x { a { b } } y").find_span() == (2, 12)

    def test_starts_at_first_brace_after_offset(self) -> None:
        assert balance_block("{ a } { b }", 3) == " b "

    def test_no_brace_returns_empty(self) -> None:
        assert balance_block("query Foo", 0) == ""
        assert BraceBalancer("query Foo").find_span() is None

    def test_unterminated_block_returns_empty(self) -> None:
        assert balance_block("{ a { b }") == ""

    def test_braces_in_strings_are_ignored(self) -> None:
        assert balance_block('{ a(s: "}") }') == ' a(s: "}") '

    def test_escaped_quote_keeps_string_open(self) -> None:
        text = r'{ a(s: "x\"}") }'
        assert balance_block(text) == r' a(s: "x\"}") '

    def test_unterminated_string_never_closes(self) -> None:
        assert balance_block('{ a(s: "}) }') == ""


class TestTopLevelSpans:
    def test_yields_each_depth_zero_block(self) -> None:
        assert list(iter_top_level_spans("{a{b}} x {c}")) == [(0, 5), (9, 11)]

    def test_ignores_stray_closers(self) -> None:
        assert list(iter_top_level_spans("} {a}")) == [(2, 4)]


class TestLocateOperationBlocks:
    def test_named_queries_in_document_order(self) -> None:
        text = "query A { x { n } } query B { y { n } }"
        assert locate_operation_blocks(text, OperationKind.QUERY) == [" x { n } ", " y { n } "]

    def test_kinds_are_separated(self) -> None:
        text = "query Q { me { id } } mutation M { logout { ok } }"
        assert locate_operation_blocks(text, OperationKind.QUERY) == [" me { id } "]
        assert locate_operation_blocks(text, OperationKind.MUTATION) == [" logout { ok } "]

    def test_keyword_is_case_insensitive(self) -> None:
        assert locate_operation_blocks("QUERY Q { a { b } }", OperationKind.QUERY) == [" a { b } "]

    def test_whitespace_is_normalized(self) -> None:
        text = "query Q {\n  a {\n    b\n  }\n}"
        assert locate_operation_blocks(text, OperationKind.QUERY) == [" a { b } "]

    def test_variable_definitions_with_default_object(self) -> None:
        text = "query Q($f: F = {a: 1}, $n: Int) { items(filter: $f) { id } }"
        assert locate_operation_blocks(text, OperationKind.QUERY) == [
            " items(filter: $f) { id } "
        ]

    def test_operation_directives_are_skipped(self) -> None:
        text = "query Q @cached(ttl: 5) { a { b } }"
        assert locate_operation_blocks(text, OperationKind.QUERY) == [" a { b } "]

    def test_keyword_nested_in_another_block_is_ignored(self) -> None:
        assert locate_operation_blocks("query { mutation { a } }", OperationKind.MUTATION) == []

    def test_keyword_inside_string_is_ignored(self) -> None:
        text = 'query { search(q: "mutation { x }") { id } }'
        assert locate_operation_blocks(text, OperationKind.MUTATION) == []

    def test_variable_named_like_keyword_is_ignored(self) -> None:
        text = "query Q($mutation: Boolean) { a { b } }"
        assert locate_operation_blocks(text, OperationKind.MUTATION) == []

    def test_unterminated_operation_is_dropped(self) -> None:
        text = "mutation A { ok { id } } mutation B { broken {"
        assert locate_operation_blocks(text, OperationKind.MUTATION) == [" ok { id } "]

    def test_empty_block_is_dropped(self) -> None:
        assert locate_operation_blocks("query { }", OperationKind.QUERY) == []

    def test_no_brace(self) -> None:
        assert locate_operation_blocks("query Foo", OperationKind.QUERY) == []

    def test_operation_named_like_other_keyword(self) -> None:
        text = "query mutation { a { b } }"
        assert locate_operation_blocks(text, OperationKind.QUERY) == [" a { b } "]
        assert locate_operation_blocks(text, OperationKind.MUTATION) == []

    def test_operation_named_like_its_own_keyword(self) -> None:
        text = "query query { a { b } }"
        assert locate_operation_blocks(text, OperationKind.QUERY) == [" a { b } "]

    def test_bare_keyword_before_operation_is_not_a_header(self) -> None:
        text = "query mutation M { a { b } }"
        assert locate_operation_blocks(text, OperationKind.MUTATION) == [" a { b } "]

    def test_unclosed_headers_scale_linearly(self) -> None:
        text = "query Q(" * 12000 + "{ a { b } }"
        started = time.perf_counter()
        blocks = locate_operation_blocks(text, OperationKind.QUERY)
        assert time.perf_counter() - started < 1.0
        assert blocks == []

    def test_many_operations_scale_linearly(self) -> None:
        text = "query { a { b } } " * 12000
        started = time.perf_counter()
        blocks = locate_operation_blocks(text, OperationKind.QUERY)
        assert time.perf_counter() - started < 2.0
        assert len(blocks) == 12000


class TestMatchPairs:
    def test_nested_pairs(self) -> None:
        assert match_pairs("(a(b))", "(", ")") == {0: 5, 2: 4}

    def test_unclosed_and_stray(self) -> None:
        assert match_pairs(") ( (x)", "(", ")") == {4: 6}


class TestAnonymousOperations:
    def test_leading_brace_is_an_implicit_query(self) -> None:
        assert locate_operation_blocks("{ viewer { id } }", OperationKind.QUERY) == [
            " viewer { id } "
        ]

    def test_never_applies_to_mutations(self) -> None:
        assert locate_operation_blocks("{ viewer { id } }", OperationKind.MUTATION) == []

    def test_can_be_disabled(self) -> None:
        blocks = locate_operation_blocks("{ viewer { id } }", OperationKind.QUERY, allow_anonymous=False)
        assert blocks == []

    def test_named_queries_take_precedence(self) -> None:
        text = "{ a { b } } query Q { c { d } }"
        assert locate_operation_blocks(text, OperationKind.QUERY) == [" c { d } "]

    @pytest.mark.parametrize("text", ["  \n { viewer { id } }", "{viewer{id}}"])
    def test_leading_whitespace_is_trimmed(self, text: str) -> None:
        blocks = locate_operation_blocks(text, OperationKind.QUERY)
        assert len(blocks) == 1
        assert "viewer" in blocks[0]
