"""
Reader for the s-expression DSL used by text and subtitle source files.

Produces plain Python objects: lists for forms, int/float for numbers, str for
string literals and Symbol (a str subclass) for symbols and keywords.
"""

import re
from pathlib import Path

from .errors import MalformedSource

_TOKEN_RE = re.compile(
    r"""
      (?P<ws>\s+)
    | (?P<comment>;[^\n]*)
    | (?P<open>\()
    | (?P<close>\))
    | (?P<string>"(?:[^"\\]|\\.)*")
    | (?P<atom>[^\s()";]+)
    """,
    re.VERBOSE | re.DOTALL,
)
_INT_RE = re.compile(r"^[+-]?\d+$")
_FLOAT_RE = re.compile(r"^[+-]?(\d+\.\d*|\.\d+)$")
_ESCAPES = {"n": "\n", "t": "\t", '"': '"', "\\": "\\"}


class Symbol(str):
    """A bare symbol such as `language-id`, or a keyword such as `:hint`."""

    def __repr__(self) -> str:
        return f"Symbol({str.__repr__(self)})"

    @property
    def is_keyword(self) -> bool:
        return self.startswith(":")


def is_string(obj) -> bool:
    """True for string literals (symbols excluded)."""
    return isinstance(obj, str) and not isinstance(obj, Symbol)


def is_symbol(obj, name: str | None = None) -> bool:
    return isinstance(obj, Symbol) and (name is None or obj == name)


def _unescape(body: str) -> str:
    return re.sub(r"\\(.)", lambda m: _ESCAPES.get(m.group(1), m.group(1)), body, flags=re.DOTALL)


def _parse_atom(tok: str, where: str):
    if tok.startswith("#x") or tok.startswith("#X"):
        try:
            return int(tok[2:], 16)
        except ValueError:
            raise MalformedSource(f"{where}: bad hex literal '{tok}'") from None
    if tok.startswith("#b") or tok.startswith("#B"):
        try:
            return int(tok[2:], 2)
        except ValueError:
            raise MalformedSource(f"{where}: bad binary literal '{tok}'") from None
    if _INT_RE.match(tok):
        return int(tok)
    if _FLOAT_RE.match(tok):
        return float(tok)
    return Symbol(tok)


def read_string(text: str, source: str = "<string>") -> list:
    """Read every top-level form in text."""
    stack: list[list] = [[]]
    open_lines: list[int] = []
    pos = 0
    line = 1
    while pos < len(text):
        m = _TOKEN_RE.match(text, pos)
        where = f"{source}:{line}"
        if not m:
            if text[pos] == '"':
                raise MalformedSource(f"{where}: unterminated string")
            raise MalformedSource(f"{where}: unexpected character {text[pos]!r}")
        kind = m.lastgroup
        tok = m.group(kind)
        if kind == "open":
            stack.append([])
            open_lines.append(line)
        elif kind == "close":
            if len(stack) == 1:
                raise MalformedSource(f"{where}: unbalanced ')'")
            form = stack.pop()
            open_lines.pop()
            stack[-1].append(form)
        elif kind == "string":
            stack[-1].append(_unescape(tok[1:-1]))
        elif kind == "atom":
            stack[-1].append(_parse_atom(tok, where))
        line += tok.count("\n")
        pos = m.end()

    if len(stack) != 1:
        raise MalformedSource(f"{source}:{open_lines[-1]}: unclosed '('")
    return stack[0]


def read_file(path: str | Path) -> list:
    """Read every top-level form in a DSL file."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise MalformedSource(f"Source file not found: {path}") from None
    return read_string(text, source=str(path))
