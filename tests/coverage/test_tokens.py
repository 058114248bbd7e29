"""Tests for the PHP token stream and the forward-only cursor."""

import pytest

from cloverlens.coverage.tokens import (
    TokenCursor,
    TokenKind,
    find_function_declaration,
    tokenize,
)


def _significant(source: str) -> list[tuple[TokenKind, str]]:
    return [(t.kind, t.text) for t in tokenize(source) if t.is_significant]


def _declares(source: str, name: str) -> bool:
    return find_function_declaration(TokenCursor(tokenize(source)), name) is not None


# =============================================================================
# tokenize
# =============================================================================


class TestTokenize:
    """Tests for tokenize()."""

    def test_empty_source(self) -> None:
        assert tokenize("") == []

    def test_inline_html_has_no_keywords(self) -> None:
        tokens = tokenize("<html>function foo()</html>")
        assert tokens
        assert all(t.kind is TokenKind.OTHER for t in tokens)

    def test_positions_are_list_indexes(self) -> None:
        tokens = tokenize("<?php function foo() {}")
        assert [t.position for t in tokens] == list(range(len(tokens)))

    def test_tokens_follow_source_order(self) -> None:
        texts = [t.text for t in tokenize("<?php function foo($a) { return $a; }")]
        assert texts.index("function") < texts.index("foo") < texts.index("return")

    def test_line_numbers(self) -> None:
        tokens = tokenize("<?php\n\nfunction foo()\n{\n}\n")
        function = next(t for t in tokens if t.is_keyword("function"))
        assert function.line == 3

    def test_keywords_are_case_insensitive(self) -> None:
        tokens = _significant("<?php FUNCTION Foo() {}")
        assert (TokenKind.KEYWORD, "FUNCTION") in tokens
        assert (TokenKind.NAME, "Foo") in tokens

    def test_comment_is_one_token(self) -> None:
        tokens = tokenize("<?php /* function foo() */ $a = 1;")
        comments = [t for t in tokens if t.kind is TokenKind.COMMENT]
        assert [c.text for c in comments] == ["/* function foo() */"]
        assert not any(t.is_keyword("function") for t in tokens)

    def test_string_contents_are_not_keywords(self) -> None:
        tokens = tokenize("<?php $s = 'function foo()'; $t = \"function bar()\";")
        assert not any(t.is_keyword("function") for t in tokens)

    def test_unicode_names(self) -> None:
        tokens = _significant("<?php function grüße() {}")
        assert (TokenKind.NAME, "grüße") in tokens

    def test_owner_is_innermost_named_class(self) -> None:
        source = (
            "<?php\n"
            "class First { function a() {} }\n"
            "trait Helper { function b() { return new class { function c() {} }; } }\n"
            "function d() {}\n"
        )

        owners = {t.text: t.owner for t in tokenize(source) if t.kind is TokenKind.NAME}

        assert owners["a"] == "First"
        assert owners["b"] == "Helper"
        assert owners["c"] == "Helper"
        assert owners["d"] is None

    def test_syntax_errors_do_not_fail(self) -> None:
        tokens = tokenize("<?php function broken( {")
        assert any(t.text == "function" for t in tokens)


# =============================================================================
# TokenCursor
# =============================================================================


class TestTokenCursor:
    """Tests for TokenCursor."""

    def test_starts_before_first_token(self) -> None:
        cursor = TokenCursor(tokenize("<?php $a;"))
        assert cursor.position == -1
        assert not cursor.exhausted

    def test_find_next_moves_to_match(self) -> None:
        cursor = TokenCursor(tokenize("<?php $a; $b;"))

        token = cursor.find_next(lambda t: t.kind is TokenKind.NAME)

        assert token is not None
        assert token.text == "a"
        assert cursor.position == token.position

    def test_find_next_searches_strictly_after_position(self) -> None:
        cursor = TokenCursor(tokenize("<?php $a; $b;"))
        first = cursor.find_next(lambda t: t.kind is TokenKind.NAME)
        second = cursor.find_next(lambda t: t.kind is TokenKind.NAME)

        assert first is not None and second is not None
        assert second.text == "b"

    def test_failed_search_leaves_cursor_unchanged(self) -> None:
        cursor = TokenCursor(tokenize("<?php $a; $b;"))
        cursor.find_next(lambda t: t.kind is TokenKind.NAME)
        before = cursor.position

        assert cursor.find_next(lambda t: t.kind is TokenKind.COMMENT) is None
        assert cursor.position == before

    def test_next_significant_skips_comments(self) -> None:
        cursor = TokenCursor(tokenize("<?php function /* c */ // d\n foo() {}"))
        function = cursor.find_next(lambda t: t.is_keyword("function"))
        assert function is not None
        position = cursor.position

        following = cursor.next_significant(function)

        assert following is not None
        assert following.text == "foo"
        assert cursor.position == position

    def test_next_significant_at_end(self) -> None:
        tokens = tokenize("<?php $a;")
        cursor = TokenCursor(tokens)
        assert cursor.next_significant(tokens[-1]) is None


# =============================================================================
# find_function_declaration
# =============================================================================


class TestFindFunctionDeclaration:
    """Tests for find_function_declaration()."""

    def test_finds_declaration(self) -> None:
        cursor = TokenCursor(tokenize("<?php class A { public function run() {} }"))
        token = find_function_declaration(cursor, "run")
        assert token is not None
        assert token.text == "function"

    def test_closure_never_matches(self) -> None:
        source = "<?php $f = function () {}; $g = static function($x) use ($f) {};"
        assert not _declares(source, "f")
        assert not _declares(source, "x")

    def test_name_is_case_sensitive(self) -> None:
        cursor = TokenCursor(tokenize("<?php function getName() {}"))
        assert find_function_declaration(cursor, "getname") is None
        assert find_function_declaration(cursor, "getName") is not None

    def test_by_reference_declaration(self) -> None:
        assert _declares("<?php function &items() { static $a = []; return $a; }", "items")

    def test_ignores_strings_and_comments(self) -> None:
        source = (
            "<?php\n"
            "// function run()\n"
            "/* function run() */\n"
            "$s = 'function run()';\n"
            '$t = "function run()";\n'
            "function run() {}\n"
        )
        cursor = TokenCursor(tokenize(source))

        token = find_function_declaration(cursor, "run")

        assert token is not None
        assert token.line == 6

    def test_ignores_interpolated_strings(self) -> None:
        source = '<?php $x = "a {$map["function fake()"]} b"; function real() {}'
        assert not _declares(source, "fake")
        assert _declares(source, "real")

    @pytest.mark.parametrize("opener", ["<<<EOT", '<<<"EOT"', "<<<'EOT'"])
    def test_ignores_heredoc_and_nowdoc(self, opener: str) -> None:
        source = f"<?php\n$s = {opener}\nfunction fake() {{}}\nEOT;\nfunction real() {{}}\n"
        assert not _declares(source, "fake")
        assert _declares(source, "real")

    def test_ignores_inline_html(self) -> None:
        source = "<p>function fake()</p><?php function real() {} ?>\n<p>function fake()</p>"
        assert not _declares(source, "fake")
        assert _declares(source, "real")

    def test_declarations_are_found_in_order(self) -> None:
        source = (
            "<?php function a() {} function b() {} function a2() {}"
            " class C { function a() {} }"
        )
        cursor = TokenCursor(tokenize(source))

        first = find_function_declaration(cursor, "a")
        second = find_function_declaration(cursor, "b")
        third = find_function_declaration(cursor, "a")

        assert first is not None and second is not None and third is not None
        assert first.position < second.position < third.position

    def test_cursor_never_rewinds(self) -> None:
        cursor = TokenCursor(tokenize("<?php function a() {} function b() {}"))
        assert find_function_declaration(cursor, "b") is not None
        assert find_function_declaration(cursor, "a") is None

    def test_arrow_function_is_not_a_declaration(self) -> None:
        assert not _declares("<?php $f = fn($x) => $x; function fn2() {}", "fn")
