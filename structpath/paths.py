"""
structpath.paths — Path expressions ↔ key sequences.

A path is an ordered sequence of keys.  Callers may hand one over directly
(a list or tuple, used as-is) or write it as a path expression:

    parse("users[0].name")          → ["users", 0, "name"]
    parse("a.b.2")                  → ["a", "b", 2]
    parse('config["dotted.key"]')   → ["config", "dotted.key"]
    parse("['0']")                  → ["0"]

Grammar:
    • segments are separated by "."
    • a bracket group "[...]" holds an unquoted token or a quoted string
      (', " or `; a backslash escapes the next character)
    • unquoted tokens made only of digits become int indices, everything
      else stays a str name; quoting always yields a str
    • the empty string is the empty path

Parsing is deterministic and memoised; malformed text raises
PathSyntaxError before any tree is touched.
"""

import re
from collections import OrderedDict
from typing import Any, Union

from .config import get_settings
from .errors import PathSyntaxError

Key = Union[int, str]

_QUOTES = "'\"`"
_SEGMENT_BREAKS = ".[]"
_BARE_NAME = re.compile(r"[^.\[\]'\"`\\]+")

_cache: "OrderedDict[str, tuple[Key, ...]]" = OrderedDict()


def is_index(key: Any) -> bool:
    """An index is a non-negative int that is not a bool."""
    return type(key) is int and key >= 0


def _coerce(token: str) -> Key:
    if token.isascii() and token.isdigit():
        return int(token)
    return token


# ═══════════════════════════════════════════════════════════════════
#  SCANNER
# ═══════════════════════════════════════════════════════════════════

class _PathScanner:
    """Single-pass scanner over one path expression."""

    __slots__ = ("text", "pos")

    def __init__(self, text: str):
        self.text = text
        self.pos = 0

    def _at_end(self) -> bool:
        return self.pos >= len(self.text)

    def _peek(self) -> str:
        return self.text[self.pos]

    def _fail(self, message: str, position: int) -> PathSyntaxError:
        return PathSyntaxError(message, self.text, position)

    def scan(self) -> list[Key]:
        if not self.text:
            return []

        keys: list[Key] = []
        while True:
            if self._peek() == "[":
                keys.append(self._bracketed())
            else:
                keys.append(self._dotted())

            if self._at_end():
                return keys

            ch = self._peek()
            if ch == "[":
                continue
            if ch == ".":
                self.pos += 1
                if self._at_end() or self._peek() in _SEGMENT_BREAKS:
                    raise self._fail("empty path segment", self.pos)
                continue
            if ch == "]":
                raise self._fail("unmatched ']'", self.pos)
            raise self._fail(f"unexpected {ch!r} after ']'", self.pos)

    def _dotted(self) -> Key:
        start = self.pos
        while not self._at_end() and self._peek() not in _SEGMENT_BREAKS:
            self.pos += 1

        if self.pos == start:
            if not self._at_end() and self._peek() == "]":
                raise self._fail("unmatched ']'", self.pos)
            raise self._fail("empty path segment", self.pos)

        return _coerce(self.text[start:self.pos])

    def _bracketed(self) -> Key:
        opened = self.pos
        self.pos += 1  # "["

        if self._at_end():
            raise self._fail("unclosed '['", opened)

        if self._peek() in _QUOTES:
            key: Key = self._quoted()
        else:
            start = self.pos
            while not self._at_end() and self._peek() != "]":
                if self._peek() == "[":
                    raise self._fail("unexpected '[' inside brackets", self.pos)
                self.pos += 1
            if self._at_end():
                raise self._fail("unclosed '['", opened)
            if self.pos == start:
                raise self._fail("empty brackets", opened)
            key = _coerce(self.text[start:self.pos])

        if self._at_end():
            raise self._fail("unclosed '['", opened)
        if self._peek() != "]":
            raise self._fail("expected ']' after quoted key", self.pos)

        self.pos += 1  # "]"
        return key

    def _quoted(self) -> str:
        quote = self._peek()
        opened = self.pos
        self.pos += 1
        chars: list[str] = []

        while True:
            if self._at_end():
                raise self._fail("unterminated string", opened)
            ch = self._peek()
            if ch == "\\":
                self.pos += 1
                if self._at_end():
                    raise self._fail("unterminated string", opened)
                chars.append(self._peek())
            elif ch == quote:
                self.pos += 1
                return "".join(chars)
            else:
                chars.append(ch)
            self.pos += 1


# ═══════════════════════════════════════════════════════════════════
#  PUBLIC API
# ═══════════════════════════════════════════════════════════════════

def parse(text: str) -> list[Key]:
    """
    Parse a path expression into its key sequence.

    Results are cached (up to Settings.parse_cache_size entries); every
    call returns a fresh list, so callers may keep or modify it.
    """
    cached = _cache.get(text)
    if cached is not None:
        _cache.move_to_end(text)
        return list(cached)

    keys = _PathScanner(text).scan()

    limit = get_settings().parse_cache_size
    if limit > 0:
        _cache[text] = tuple(keys)
        while len(_cache) > limit:
            _cache.popitem(last=False)

    return keys


def clear_cache() -> None:
    _cache.clear()


def get_parsed_path(path: Any) -> Any:
    """
    Normalise any accepted path form to a key sequence.

    Lists and tuples are returned as-is (no parsing, no copy), a bare int is
    a one-step path, None is the empty path and strings are parsed.
    """
    if isinstance(path, (list, tuple)):
        return path
    if path is None:
        return []
    if isinstance(path, str):
        return parse(path)
    if is_index(path):
        return [path]
    raise TypeError(
        f"path must be a str, a non-negative int, a list or a tuple, "
        f"not {type(path).__name__}"
    )


def create(path: Any) -> str:
    """
    Render a key sequence as a path expression.

    Inverse of parse for str keys and non-negative int keys:
        parse(create(keys)) == keys
    Any other key (a negative int, a float) is rendered as a quoted string
    and parses back as that string.
    """
    parts: list[str] = []
    for key in get_parsed_path(path):
        if is_index(key):
            parts.append(f"[{key}]")
            continue

        name = str(key)
        if isinstance(key, str) and _BARE_NAME.fullmatch(name) and not name.isdigit():
            parts.append(f".{name}" if parts else name)
        else:
            escaped = name.replace("\\", "\\\\").replace('"', '\\"')
            parts.append(f'["{escaped}"]')

    return "".join(parts)
