"""MiniLang front end: tokenizer, recursive-descent checker and three-address code emitter."""

from __future__ import annotations

import logging
import re
import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import FrozenSet, List, NoReturn, Optional, Sequence, Set, Tuple

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Diagnostic infrastructure


class ErrorKind(Enum):
	SYNTAX_ERROR = auto()
	REDECLARATION = auto()
	UNDECLARED_VARIABLE = auto()


@dataclass(frozen=True)
class Position:
	line: int
	column: int
	index: int


@dataclass(frozen=True)
class Span:
	start: Position
	end: Position


@dataclass
class Diagnostic:
	"""A fatal analysis problem. Every diagnostic stops the run.

	``token`` is the offending token, or ``None`` when the token stream ended
	where a token was still required.
	"""

	kind: ErrorKind
	message: str
	token: Optional[Token] = None
	hint: Optional[str] = None

	@property
	def span(self) -> Optional[Span]:
		return self.token.span if self.token else None

	@property
	def at_end_of_input(self) -> bool:
		return self.token is None

	def location(self) -> str:
		return str(self.token) if self.token else "EOF"

	def render(self) -> str:
		heading = "Syntax Error" if self.kind == ErrorKind.SYNTAX_ERROR else "Semantic Error"
		return f"{heading}: {self.message} at token: {self.location()}"


class AnalysisError(Exception):
	def __init__(self, diagnostic: Diagnostic) -> None:
		super().__init__(diagnostic.message)
		self.diagnostic = diagnostic

	def __str__(self) -> str:
		return self.diagnostic.render()


class MiniLangSyntaxError(AnalysisError):
	pass


class RedeclarationError(AnalysisError):
	pass


class UndeclaredVariableError(AnalysisError):
	pass


# ---------------------------------------------------------------------------
# Tokenizer


class TokenKind(Enum):
	KEYWORD = auto()
	IDENTIFIER = auto()
	NUMBER = auto()
	ASSIGN_OP = auto()
	SEMICOLON = auto()
	OPERATOR = auto()
	COMPARATOR = auto()
	LEFT_PAREN = auto()
	RIGHT_PAREN = auto()
	LEFT_BRACE = auto()
	RIGHT_BRACE = auto()


RESERVED_WORDS: FrozenSet[str] = frozenset({"int", "if", "else", "while", "print"})

# Priority order: the first alternative that matches at a position wins.
TOKEN_SPEC: List[Tuple[TokenKind, str]] = [
	(TokenKind.KEYWORD, r"\b(?:int|if|else|while|print)\b"),
	(TokenKind.IDENTIFIER, r"\b[A-Za-z_][A-Za-z0-9_]*\b"),
	(TokenKind.NUMBER, r"\b[0-9]+\b"),
	(TokenKind.ASSIGN_OP, r"="),
	(TokenKind.SEMICOLON, r";"),
	(TokenKind.OPERATOR, r"[+\-*/]"),
	(TokenKind.COMPARATOR, r"[<>]"),
	(TokenKind.LEFT_PAREN, r"\("),
	(TokenKind.RIGHT_PAREN, r"\)"),
	(TokenKind.LEFT_BRACE, r"\{"),
	(TokenKind.RIGHT_BRACE, r"\}"),
]

MASTER_PATTERN = re.compile("|".join(f"(?P<{kind.name}>{pattern})" for kind, pattern in TOKEN_SPEC))


@dataclass(frozen=True)
class Token:
	kind: TokenKind
	lexeme: str
	span: Optional[Span] = field(default=None, compare=False)

	def __str__(self) -> str:
		return f"({self.kind.name}, {self.lexeme})"


def tokenize(source: str) -> List[Token]:
	"""Split ``source`` into tokens.

	Text that no pattern recognizes (whitespace included) is skipped without
	producing a token, so this never fails; malformed input just yields fewer
	tokens.
	"""
	tokens: List[Token] = []
	line = 1
	line_start = 0
	scanned = 0
	for mo in MASTER_PATTERN.finditer(source):
		start, end = mo.span()
		newlines = source.count("\n", scanned, start)
		if newlines:
			line += newlines
			line_start = source.rfind("\n", scanned, start) + 1
		scanned = end
		kind = TokenKind[mo.lastgroup]
		lexeme = mo.group()
		# Unreachable while KEYWORD precedes IDENTIFIER in TOKEN_SPEC.
		if kind == TokenKind.IDENTIFIER and lexeme in RESERVED_WORDS:
			kind = TokenKind.KEYWORD
		span = Span(Position(line, start - line_start + 1, start), Position(line, end - line_start + 1, end))
		tokens.append(Token(kind, lexeme, span))
	logger.debug("tokenized %d characters into %d tokens", len(source), len(tokens))
	return tokens


# ---------------------------------------------------------------------------
# Analyzer (parser, symbol table and three-address code)


@dataclass
class AnalysisResult:
	declared: Set[str] = field(default_factory=set)
	code: List[str] = field(default_factory=list)
	diagnostic: Optional[Diagnostic] = None

	@property
	def ok(self) -> bool:
		return self.diagnostic is None


class Analyzer:
	"""Recursive-descent checker for MiniLang.

	Conditions (``if``/``while``) and ``print`` arguments go through the
	checking-only expression methods. Assignment right-hand sides go through
	the ``*_code`` methods, which parse the same shape and append three-address
	code. Analysis stops at the first error.
	"""

	def __init__(self, tokens: Sequence[Token]) -> None:
		self.tokens: List[Token] = list(tokens)
		self.index = 0
		self.declared: Set[str] = set()
		self.code: List[str] = []
		self._temp_counter = 0

	def analyze(self) -> AnalysisResult:
		self.index = 0
		self.declared = set()
		self.code = []
		self._temp_counter = 0
		try:
			while not self._is_at_end():
				self._parse_statement()
		except AnalysisError as exc:
			logger.debug("analysis halted: %s", exc)
			return AnalysisResult(diagnostic=exc.diagnostic)
		except RecursionError:
			# Each '(' costs three or four frames.
			logger.debug("analysis halted: nesting exceeded the recursion limit at token %d", self.index)
			diagnostic = Diagnostic(
				ErrorKind.SYNTAX_ERROR,
				"Expression nested too deeply.",
				self._current(),
				hint="Split the expression across several assignments using extra variables.",
			)
			return AnalysisResult(diagnostic=diagnostic)
		logger.debug("analysis passed: %d variables, %d instructions", len(self.declared), len(self.code))
		return AnalysisResult(declared=set(self.declared), code=list(self.code))

	# Statements --------------------------------------------------------------

	def _parse_statement(self) -> None:
		if self._match(TokenKind.KEYWORD, "int"):
			self._parse_declaration()
		elif self._check(TokenKind.IDENTIFIER):
			self._parse_assignment()
		elif self._match(TokenKind.KEYWORD, "if"):
			self._parse_if_statement()
		elif self._match(TokenKind.KEYWORD, "while"):
			self._parse_while_statement()
		elif self._match(TokenKind.KEYWORD, "print"):
			self._parse_print_statement()
		else:
			self._syntax_error("Expected a valid statement.")

	def _parse_declaration(self) -> None:
		name_token = self._expect(TokenKind.IDENTIFIER, "Expected variable name after 'int'.")
		name = name_token.lexeme
		if name in self.declared:
			raise RedeclarationError(
				Diagnostic(
					ErrorKind.REDECLARATION,
					f"Variable '{name}' already declared.",
					name_token,
					hint=f"Each variable is declared once. Remove the second 'int {name};'.",
				)
			)
		self.declared.add(name)
		self._expect(TokenKind.SEMICOLON, "Expected ';' after declaration.")

	def _parse_assignment(self) -> None:
		name_token = self._expect(TokenKind.IDENTIFIER, "Expected variable name.")
		self._require_declared(name_token)
		self._expect(TokenKind.ASSIGN_OP, "Expected '=' in assignment.")
		result = self._parse_expression_code()
		self.code.append(f"{name_token.lexeme} = {result}")
		self._expect(TokenKind.SEMICOLON, "Expected ';' after assignment.")

	def _parse_if_statement(self) -> None:
		self._expect(TokenKind.LEFT_PAREN, "Expected '(' after 'if'.")
		self._parse_expression()
		self._expect(TokenKind.RIGHT_PAREN, "Expected ')' after condition.")
		self._parse_block()
		if self._match(TokenKind.KEYWORD, "else"):
			self._parse_block()

	def _parse_while_statement(self) -> None:
		self._expect(TokenKind.LEFT_PAREN, "Expected '(' after 'while'.")
		self._parse_expression()
		self._expect(TokenKind.RIGHT_PAREN, "Expected ')' after condition.")
		self._parse_block()

	def _parse_print_statement(self) -> None:
		self._expect(TokenKind.LEFT_PAREN, "Expected '(' after 'print'.")
		# Only the first token of the argument is checked against the symbol table.
		if self._check(TokenKind.IDENTIFIER):
			self._require_declared(self.tokens[self.index])
		self._parse_expression()
		self._expect(TokenKind.RIGHT_PAREN, "Expected ')' after expression.")
		self._expect(TokenKind.SEMICOLON, "Expected ';' after print statement.")

	def _parse_block(self) -> None:
		self._expect(TokenKind.LEFT_BRACE, "Expected '{' to start block.")
		while not self._check(TokenKind.RIGHT_BRACE) and not self._is_at_end():
			self._parse_statement()
		self._expect(TokenKind.RIGHT_BRACE, "Expected '}' to close block.")

	# Expressions (checked only) ------------------------------------------------

	def _parse_expression(self) -> None:
		self._parse_arithmetic()
		if self._match(TokenKind.COMPARATOR):
			self._parse_arithmetic()

	def _parse_arithmetic(self) -> None:
		self._parse_term()
		while self._match(TokenKind.OPERATOR, "+", "-"):
			self._parse_term()

	def _parse_term(self) -> None:
		self._parse_factor()
		while self._match(TokenKind.OPERATOR, "*", "/"):
			self._parse_factor()

	def _parse_factor(self) -> None:
		if self._match(TokenKind.IDENTIFIER) or self._match(TokenKind.NUMBER):
			return
		if self._match(TokenKind.LEFT_PAREN):
			self._parse_expression()
			self._expect(TokenKind.RIGHT_PAREN, "Expected ')' after expression.")
			return
		self._syntax_error("Expected number, variable, or expression.")

	# Expressions (three-address code) -------------------------------------------

	def _parse_expression_code(self) -> str:
		left = self._parse_term_code()
		while self._match(TokenKind.OPERATOR, "+", "-"):
			operator = self._previous().lexeme
			right = self._parse_term_code()
			left = self._emit_binary(left, operator, right)
		return left

	def _parse_term_code(self) -> str:
		left = self._parse_factor_code()
		while self._match(TokenKind.OPERATOR, "*", "/"):
			operator = self._previous().lexeme
			right = self._parse_factor_code()
			left = self._emit_binary(left, operator, right)
		return left

	def _parse_factor_code(self) -> str:
		if self._match(TokenKind.NUMBER) or self._match(TokenKind.IDENTIFIER):
			return self._previous().lexeme
		if self._match(TokenKind.LEFT_PAREN):
			inner = self._parse_expression_code()
			self._expect(TokenKind.RIGHT_PAREN, "Expected ')' after expression.")
			return inner
		self._syntax_error("Expected number, variable, or expression.")

	def _emit_binary(self, left: str, operator: str, right: str) -> str:
		temp = self._new_temp()
		self.code.append(f"{temp} = {left} {operator} {right}")
		return temp

	def _new_temp(self) -> str:
		temp = f"t{self._temp_counter}"
		self._temp_counter += 1
		return temp

	# Utility parsing helpers -------------------------------------------------

	def _match(self, kind: TokenKind, *lexemes: str) -> bool:
		if not self._check(kind):
			return False
		if lexemes and self.tokens[self.index].lexeme not in lexemes:
			return False
		self.index += 1
		return True

	def _check(self, kind: TokenKind) -> bool:
		if self._is_at_end():
			return False
		return self.tokens[self.index].kind == kind

	def _expect(self, kind: TokenKind, message: str) -> Token:
		if self._check(kind):
			self.index += 1
			return self._previous()
		self._syntax_error(message, expected=kind)

	def _previous(self) -> Token:
		return self.tokens[self.index - 1]

	def _current(self) -> Optional[Token]:
		return None if self._is_at_end() else self.tokens[self.index]

	def _is_at_end(self) -> bool:
		return self.index >= len(self.tokens)

	def _require_declared(self, token: Token) -> None:
		if token.lexeme not in self.declared:
			raise UndeclaredVariableError(
				Diagnostic(
					ErrorKind.UNDECLARED_VARIABLE,
					f"Variable '{token.lexeme}' not declared.",
					token,
					hint=f"Declare it first with 'int {token.lexeme};'.",
				)
			)

	def _syntax_error(self, message: str, expected: Optional[TokenKind] = None) -> NoReturn:
		got = self._current()
		hint = self._hint_for_expect(expected, got) if expected else None
		raise MiniLangSyntaxError(Diagnostic(ErrorKind.SYNTAX_ERROR, message, got, hint=hint))

	def _hint_for_expect(self, expected: TokenKind, got: Optional[Token]) -> Optional[str]:
		if got and got.kind == TokenKind.COMPARATOR and expected in {TokenKind.SEMICOLON, TokenKind.RIGHT_PAREN}:
			return "A condition holds at most one '<' or '>', and assignments can't compare at all."
		if expected == TokenKind.SEMICOLON:
			return "Statements and declarations must end with ';'."
		if expected == TokenKind.RIGHT_PAREN:
			return "Missing ')'. Check conditions and groupings like: while (i < n) { ... }"
		if expected == TokenKind.LEFT_PAREN:
			return "Missing '('. Conditions and print need parentheses like: print(x);"
		if expected == TokenKind.LEFT_BRACE:
			return "Blocks start with '{'. Conditions must be followed by a block: if (x > 0) { ... }"
		if expected == TokenKind.RIGHT_BRACE:
			return "Blocks end with '}'. Check for a missing closing brace or an extra '{' earlier."
		if expected == TokenKind.IDENTIFIER and got and got.kind == TokenKind.KEYWORD:
			return "Identifiers can't be keywords. Rename it (e.g., 'count' instead of 'int')."
		return None


def analyze(tokens: Sequence[Token]) -> AnalysisResult:
	return Analyzer(tokens).analyze()


# ---------------------------------------------------------------------------
# Compilation pipeline


@dataclass
class CompilationArtifacts:
	tokens: List[Token]
	declared: Set[str]
	code: List[str]
	diagnostics: List[Diagnostic]
	duration_ms: float

	@property
	def ok(self) -> bool:
		return not self.diagnostics


class MiniLangEngine:
	def compile(self, source: str) -> CompilationArtifacts:
		start = time.perf_counter()
		tokens = tokenize(source)
		result = analyze(tokens)
		duration_ms = (time.perf_counter() - start) * 1000
		diagnostics = [result.diagnostic] if result.diagnostic else []
		return CompilationArtifacts(tokens=tokens, declared=result.declared, code=result.code, diagnostics=diagnostics, duration_ms=duration_ms)
