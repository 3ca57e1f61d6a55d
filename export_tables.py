from __future__ import annotations

"""
Export the tables of a MiniLang analysis (tokens, symbol table, three-address
code) into Excel-friendly files.

Outputs (always):
  - MiniLang_Tokens.csv
  - MiniLang_Symbols.csv
  - MiniLang_TAC.csv
  - MiniLang_Diagnostics.csv  (only when analysis fails)

Optional (only if openpyxl is installed):
  - MiniLang_Report.xlsx  (one sheet per table)

Run:
  python -X utf8 export_tables.py program.minilang [output_dir]
"""

import csv
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from minilang import CompilationArtifacts, MiniLangEngine


def token_rows(art: CompilationArtifacts) -> List[List[object]]:
	rows: List[List[object]] = []
	for t in art.tokens:
		line = t.span.start.line if t.span else ""
		col = t.span.start.column if t.span else ""
		rows.append([t.kind.name, t.lexeme, line, col])
	return rows


def symbol_rows(art: CompilationArtifacts) -> List[List[object]]:
	return [[name, "int"] for name in sorted(art.declared)]


def tac_rows(art: CompilationArtifacts) -> List[List[object]]:
	return [[i, instr] for i, instr in enumerate(art.code)]


def diagnostic_rows(art: CompilationArtifacts) -> List[List[object]]:
	return [[d.kind.name, d.message, d.location(), d.hint or ""] for d in art.diagnostics]


TOKEN_HEADER = ["Kind", "Lexeme", "Line", "Column"]
SYMBOL_HEADER = ["Symbol", "Type"]
TAC_HEADER = ["#", "Instruction"]
DIAGNOSTIC_HEADER = ["Kind", "Message", "Token", "Hint"]


def write_csv(out_path: Path, header: Sequence[str], rows: List[List[object]]) -> None:
	with out_path.open("w", newline="", encoding="utf-8") as f:
		w = csv.writer(f)
		w.writerow(header)
		for row in rows:
			w.writerow(row)


def export_csv(art: CompilationArtifacts, out_dir: Path) -> List[Path]:
	written = [out_dir / "MiniLang_Tokens.csv", out_dir / "MiniLang_Symbols.csv", out_dir / "MiniLang_TAC.csv"]
	write_csv(written[0], TOKEN_HEADER, token_rows(art))
	write_csv(written[1], SYMBOL_HEADER, symbol_rows(art))
	write_csv(written[2], TAC_HEADER, tac_rows(art))
	if art.diagnostics:
		diag_path = out_dir / "MiniLang_Diagnostics.csv"
		write_csv(diag_path, DIAGNOSTIC_HEADER, diagnostic_rows(art))
		written.append(diag_path)
	return written


def try_export_xlsx(art: CompilationArtifacts, out_dir: Path) -> bool:
	try:
		import openpyxl  # type: ignore
		from openpyxl.utils import get_column_letter  # type: ignore
	except ImportError:
		return False

	wb = openpyxl.Workbook()
	wb.remove(wb.active)

	sheets = [
		("Tokens", TOKEN_HEADER, token_rows(art)),
		("Symbols", SYMBOL_HEADER, symbol_rows(art)),
		("TAC", TAC_HEADER, tac_rows(art)),
	]
	if art.diagnostics:
		sheets.append(("Diagnostics", DIAGNOSTIC_HEADER, diagnostic_rows(art)))

	for title, header, rows in sheets:
		ws = wb.create_sheet(title)
		ws.append(list(header))
		for row in rows:
			ws.append(row)

	# Basic column sizing
	for sheet in wb.worksheets:
		for col in range(1, sheet.max_column + 1):
			letter = get_column_letter(col)
			sheet.column_dimensions[letter].width = 22 if col == 1 else 18

	wb.save(out_dir / "MiniLang_Report.xlsx")
	return True


def main(argv: Optional[Sequence[str]] = None) -> int:
	args = list(sys.argv[1:] if argv is None else argv)
	if not args:
		print("usage: export_tables.py program.minilang [output_dir]", file=sys.stderr)
		return 2
	source_path = Path(args[0])
	out_dir = Path(args[1]) if len(args) > 1 else source_path.resolve().parent
	out_dir.mkdir(parents=True, exist_ok=True)

	art = MiniLangEngine().compile(source_path.read_text(encoding="utf-8"))

	written = export_csv(art, out_dir)
	xlsx_ok = try_export_xlsx(art, out_dir)

	print("Wrote:", ", ".join(p.name for p in written))
	print("Wrote MiniLang_Report.xlsx:", xlsx_ok)
	for d in art.diagnostics:
		print(d.render())
	return 0 if art.ok else 1


if __name__ == "__main__":
	raise SystemExit(main())
