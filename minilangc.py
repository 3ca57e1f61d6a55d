"""
Command-line driver for the MiniLang front end.

Prints the token table (optional), the generated three-address code and the
symbol table, or the first diagnostic. Exit status is 1 when analysis fails.

Usage:
  python -X utf8 minilangc.py program.minilang
  python -X utf8 minilangc.py program.minilang --tokens
  python -X utf8 minilangc.py - --json < program.minilang
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from minilang import CompilationArtifacts, Diagnostic, MiniLangEngine, Token


def read_source(path: str) -> str:
	if path == "-":
		lines = sys.stdin.read().splitlines()
	else:
		lines = Path(path).read_text(encoding="utf-8").splitlines()
	return "".join(line + "\n" for line in lines)


def format_tokens(tokens: List[Token]) -> List[str]:
	return [str(t) for t in tokens]


def format_symbols(declared: Sequence[str]) -> List[str]:
	return [f"- {name}" for name in sorted(declared)]


def diagnostic_to_dict(d: Diagnostic) -> Dict[str, Any]:
	return {
		"kind": d.kind.name,
		"message": d.message,
		"hint": d.hint,
		"token": str(d.token) if d.token else None,
		"line": d.span.start.line if d.span else None,
		"column": d.span.start.column if d.span else None,
	}


def report_json(art: CompilationArtifacts) -> str:
	report = {
		"ok": art.ok,
		"duration_ms": art.duration_ms,
		"tokens": [{"kind": t.kind.name, "lexeme": t.lexeme} for t in art.tokens],
		"symbols": sorted(art.declared),
		"tac": art.code,
		"diagnostics": [diagnostic_to_dict(d) for d in art.diagnostics],
	}
	return json.dumps(report, indent=2)


def report_text(art: CompilationArtifacts, *, show_tokens: bool) -> None:
	if show_tokens:
		print("Lexical Tokens:")
		for line in format_tokens(art.tokens):
			print(line)
	if not art.ok:
		return
	print("Syntax Analysis: Passed.")
	if art.code:
		print("Generated 3-Address Code:")
		for line in art.code:
			print(line)
	print("Declared Variables (Symbol Table):")
	for line in format_symbols(list(art.declared)):
		print(line)


def main(argv: Optional[Sequence[str]] = None) -> int:
	parser = argparse.ArgumentParser(description="Check a MiniLang program and emit three-address code")
	parser.add_argument("source", help="MiniLang source file, or '-' for stdin")
	parser.add_argument("--tokens", action="store_true", help="also print the token table")
	parser.add_argument("--json", action="store_true", help="print a JSON report instead of text")
	parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
	args = parser.parse_args(argv)

	if args.verbose:
		logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

	try:
		source = read_source(args.source)
	except FileNotFoundError:
		print(f"Error: File not found - {args.source}", file=sys.stderr)
		return 1
	except OSError as exc:
		print(f"Error reading file: {exc}", file=sys.stderr)
		return 1

	art = MiniLangEngine().compile(source)

	if args.json:
		print(report_json(art))
	else:
		report_text(art, show_tokens=args.tokens)

	for d in art.diagnostics:
		print(d.render(), file=sys.stderr)
		if d.hint:
			print(f"  hint: {d.hint}", file=sys.stderr)
	return 0 if art.ok else 1


if __name__ == "__main__":
	raise SystemExit(main())
