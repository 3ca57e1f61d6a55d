from __future__ import annotations

import pytest

from minilang import RESERVED_WORDS, Token, TokenKind, tokenize


def kinds_and_lexemes(source: str):
	return [(t.kind, t.lexeme) for t in tokenize(source)]


def test_declaration_and_assignment():
	assert kinds_and_lexemes("int x; x = 1;") == [
		(TokenKind.KEYWORD, "int"),
		(TokenKind.IDENTIFIER, "x"),
		(TokenKind.SEMICOLON, ";"),
		(TokenKind.IDENTIFIER, "x"),
		(TokenKind.ASSIGN_OP, "="),
		(TokenKind.NUMBER, "1"),
		(TokenKind.SEMICOLON, ";"),
	]


@pytest.mark.parametrize("word", sorted(RESERVED_WORDS))
def test_reserved_words_are_keywords(word):
	assert kinds_and_lexemes(word) == [(TokenKind.KEYWORD, word)]


def test_words_containing_keywords_are_identifiers():
	assert kinds_and_lexemes("integer iff print_x _while while") == [
		(TokenKind.IDENTIFIER, "integer"),
		(TokenKind.IDENTIFIER, "iff"),
		(TokenKind.IDENTIFIER, "print_x"),
		(TokenKind.IDENTIFIER, "_while"),
		(TokenKind.KEYWORD, "while"),
	]


def test_operators_comparators_and_brackets():
	assert [t.kind for t in tokenize("a<b>c+-*/(){}")] == [
		TokenKind.IDENTIFIER,
		TokenKind.COMPARATOR,
		TokenKind.IDENTIFIER,
		TokenKind.COMPARATOR,
		TokenKind.IDENTIFIER,
		TokenKind.OPERATOR,
		TokenKind.OPERATOR,
		TokenKind.OPERATOR,
		TokenKind.OPERATOR,
		TokenKind.LEFT_PAREN,
		TokenKind.RIGHT_PAREN,
		TokenKind.LEFT_BRACE,
		TokenKind.RIGHT_BRACE,
	]


def test_double_equals_is_two_assign_ops():
	assert kinds_and_lexemes("==") == [(TokenKind.ASSIGN_OP, "="), (TokenKind.ASSIGN_OP, "=")]


def test_unknown_characters_are_dropped():
	assert kinds_and_lexemes("int x; x = 1 # 2;") == [
		(TokenKind.KEYWORD, "int"),
		(TokenKind.IDENTIFIER, "x"),
		(TokenKind.SEMICOLON, ";"),
		(TokenKind.IDENTIFIER, "x"),
		(TokenKind.ASSIGN_OP, "="),
		(TokenKind.NUMBER, "1"),
		(TokenKind.NUMBER, "2"),
		(TokenKind.SEMICOLON, ";"),
	]


@pytest.mark.parametrize("source", ["", "   ", "\n\t\n", "# ! % & @"])
def test_nothing_recognizable_gives_no_tokens(source):
	assert tokenize(source) == []


def test_digits_glued_to_letters_are_skipped():
	assert tokenize("12abc") == []
	assert kinds_and_lexemes("abc12") == [(TokenKind.IDENTIFIER, "abc12")]


def test_numbers_next_to_operators():
	assert kinds_and_lexemes("10*(2+3)") == [
		(TokenKind.NUMBER, "10"),
		(TokenKind.OPERATOR, "*"),
		(TokenKind.LEFT_PAREN, "("),
		(TokenKind.NUMBER, "2"),
		(TokenKind.OPERATOR, "+"),
		(TokenKind.NUMBER, "3"),
		(TokenKind.RIGHT_PAREN, ")"),
	]


def test_spans_track_lines_and_columns():
	tokens = tokenize("int x;\n  y = 2;")
	first, y = tokens[0], tokens[3]
	assert (first.span.start.line, first.span.start.column) == (1, 1)
	assert y.lexeme == "y"
	assert (y.span.start.line, y.span.start.column, y.span.start.index) == (2, 3, 9)
	assert y.span.end.column == 4


def test_spans_skip_lines_with_only_unknown_characters():
	tokens = tokenize("a\n#\n\nb")
	assert tokens[1].span.start.line == 4
	assert tokens[1].span.start.column == 1


def test_token_equality_ignores_span():
	assert tokenize("  x")[0] == Token(TokenKind.IDENTIFIER, "x")


def test_token_str():
	assert str(Token(TokenKind.KEYWORD, "int")) == "(KEYWORD, int)"
	assert str(Token(TokenKind.LEFT_BRACE, "{")) == "(LEFT_BRACE, {)"
