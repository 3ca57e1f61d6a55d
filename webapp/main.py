from __future__ import annotations

from dataclasses import is_dataclass
from pathlib import Path
from typing import Any, Dict, List

from fastapi import FastAPI
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from minilang import Diagnostic, MiniLangEngine, Token, tokenize


app = FastAPI(title="MiniLang Front End", version="1.0.0")

STATIC_DIR = Path(__file__).parent / "static"
if STATIC_DIR.exists():
	app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

app.add_middleware(
	CORSMiddleware,
	allow_origins=["*"],
	allow_credentials=True,
	allow_methods=["*"],
	allow_headers=["*"],
)


class CompileRequest(BaseModel):
	source: str
	include_tokens: bool = True


class TokenizeRequest(BaseModel):
	source: str


def _to_json(obj: Any, *, depth: int = 0, max_depth: int = 12) -> Any:
	"""Best-effort conversion of front-end artifacts to JSON-safe structures."""
	if depth > max_depth:
		return {"_truncated": True}
	if obj is None:
		return None
	if isinstance(obj, (str, int, float, bool)):
		return obj
	if isinstance(obj, (list, tuple)):
		return [_to_json(x, depth=depth + 1, max_depth=max_depth) for x in obj]
	if isinstance(obj, dict):
		return {str(k): _to_json(v, depth=depth + 1, max_depth=max_depth) for k, v in obj.items()}
	if is_dataclass(obj):
		data: Dict[str, Any] = {"_type": obj.__class__.__name__}
		for k, v in obj.__dict__.items():
			data[k] = _to_json(v, depth=depth + 1, max_depth=max_depth)
		return data
	# Enums (ErrorKind/TokenKind)
	if hasattr(obj, "name") and hasattr(obj, "value"):
		return getattr(obj, "name")
	return str(obj)


def _token_json(t: Token) -> Dict[str, Any]:
	return {"kind": t.kind.name, "lexeme": t.lexeme, "span": _to_json(t.span)}


def _diagnostic_json(d: Diagnostic) -> Dict[str, Any]:
	return {
		"kind": d.kind.name,
		"message": d.message,
		"hint": d.hint,
		"token": _token_json(d.token) if d.token else None,
		"rendered": d.render(),
		"span": _to_json(d.span),
	}


@app.get("/", response_class=HTMLResponse)
def index() -> HTMLResponse:
	index_path = STATIC_DIR / "index.html"
	if index_path.exists():
		return HTMLResponse(index_path.read_text(encoding="utf-8"))
	return HTMLResponse(
		"<h2>MiniLang Front End API</h2><p>POST <code>/api/compile</code> with JSON: <code>{\"source\": \"...\"}</code></p>"
	)


@app.get("/health")
def health() -> Dict[str, str]:
	return {"status": "ok"}


@app.post("/api/compile")
def compile_source(req: CompileRequest) -> Dict[str, Any]:
	engine = MiniLangEngine()
	art = engine.compile(req.source)
	tokens: List[Dict[str, Any]] = [_token_json(t) for t in art.tokens] if req.include_tokens else []
	return {
		"ok": art.ok,
		"duration_ms": art.duration_ms,
		"token_count": len(art.tokens),
		"diagnostic_count": len(art.diagnostics),
		"diagnostics": [_diagnostic_json(d) for d in art.diagnostics],
		"tokens": tokens,
		"symbols": sorted(art.declared),
		"tac": list(art.code),
	}


@app.post("/api/tokenize")
def tokenize_source(req: TokenizeRequest) -> Dict[str, Any]:
	tokens = tokenize(req.source)
	return {
		"token_count": len(tokens),
		"tokens": [_token_json(t) for t in tokens],
	}
