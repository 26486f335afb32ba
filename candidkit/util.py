"""Text helpers shared by the Candid parsers."""

import re
from typing import Iterator, List, Tuple


_LINE_COMMENT_RE = re.compile(r"//[^\n]*")
_BLOCK_COMMENT_RE = re.compile(r"/\*.*?\*/", re.DOTALL)
_IDENT_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_DIGITS_RE = re.compile(r"^-?\d+$")

_OPENERS = "{(<"
_CLOSERS = "})>"


def strip_comments(src: str) -> str:
    src = _BLOCK_COMMENT_RE.sub(" ", src)
    return _LINE_COMMENT_RE.sub("", src)


def is_ident_char(ch: str) -> bool:
    return ch.isalnum() or ch in "_'"


def is_ident(value: str) -> bool:
    return bool(_IDENT_RE.match(value))


def is_digits(value: str) -> bool:
    return bool(_DIGITS_RE.match(value))


def _scan(text: str, start: int = 0) -> Iterator[Tuple[int, str, int]]:
    """Yield ``(index, char, depth)`` for chars outside quoted strings.

    Depth counts open ``{ ( <`` brackets before the char. The ``>`` of an
    arrow ``->`` is not a bracket.
    """
    depth = 0
    in_quote = False
    i = start
    while i < len(text):
        ch = text[i]
        if in_quote:
            if ch == "\\":
                i += 2
                continue
            if ch == '"':
                in_quote = False
            i += 1
            continue
        if ch == '"':
            in_quote = True
            i += 1
            continue
        if ch in _CLOSERS and not (ch == ">" and i > 0 and text[i - 1] == "-"):
            depth -= 1
            yield i, ch, depth
        elif ch in _OPENERS:
            yield i, ch, depth
            depth += 1
        else:
            yield i, ch, depth
        i += 1


def split_top_level(body: str, sep: str) -> List[str]:
    """Split on ``sep`` outside of brackets and quoted strings.

    Empty pieces are dropped and every piece is stripped.
    """
    parts: List[str] = []
    start = 0
    for i, ch, depth in _scan(body):
        if ch == sep and depth == 0:
            parts.append(body[start:i])
            start = i + 1
    parts.append(body[start:])
    return [p.strip() for p in parts if p.strip()]


def find_top_level(text: str, target: str, start: int = 0) -> int:
    """Index of the first ``target`` char at bracket depth zero, or -1."""
    for i, ch, depth in _scan(text, start):
        if ch == target and depth == 0:
            return i
    return -1


def matching_close(text: str, open_index: int) -> int:
    """Index of the bracket closing the one at ``open_index``, or -1."""
    for i, ch, depth in _scan(text, open_index):
        if ch in _CLOSERS and depth == 0:
            return i
    return -1


def unquote(name: str) -> str:
    name = name.strip()
    if len(name) >= 2 and name[0] == '"' and name[-1] == '"':
        return name[1:-1]
    return name
