"""Accepted-dependency lexer for ``import.meta.hot.accept()`` calls.

``hot.accept()`` only takes a string literal or an array of string
literals as its dependency argument, so a small state machine over the
call's arguments is enough; the module never needs a full parse.

Recognized shapes::

    import.meta.hot.accept()                     # self-accepting
    import.meta.hot.accept((mod) => ...)         # self-accepting
    import.meta.hot.accept('./dep.js', cb)       # accepts ./dep.js
    import.meta.hot.accept(['./a.js', "./b.js"]) # accepts both
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum, auto

from whisker._errors import AcceptedDepsError


class LexerState(Enum):
    IN_CALL = auto()
    IN_SINGLE_QUOTE_STRING = auto()
    IN_DOUBLE_QUOTE_STRING = auto()
    IN_TEMPLATE_STRING = auto()
    IN_ARRAY = auto()


_QUOTE_STATES = {
    "'": LexerState.IN_SINGLE_QUOTE_STRING,
    '"': LexerState.IN_DOUBLE_QUOTE_STRING,
    "`": LexerState.IN_TEMPLATE_STRING,
}
_CLOSING_QUOTES = {state: quote for quote, state in _QUOTE_STATES.items()}

_ACCEPT_CALL_RE = re.compile(r"\bimport\s*\.\s*meta\s*\.\s*hot\s*\.\s*accept\s*\(")


def lex_accepted_hmr_deps(code: str, start: int, urls: set[str]) -> bool:
    """Lex the arguments of one ``hot.accept()`` call.

    Args:
        code: Module source text.
        start: Offset just past the call's opening parenthesis.
        urls: Receives every accepted dependency literal.

    Returns:
        True if the call makes the module self-accepting (no arguments, or
        a first argument that is neither a string nor an array literal).

    Raises:
        AcceptedDepsError: The dependency array holds something other than
            string literals, or a template literal interpolates.

    """
    state = LexerState.IN_CALL
    # Strings never nest, so one saved state is all the stack needed.
    prev_state = LexerState.IN_CALL
    current_dep = ""

    for i in range(start, len(code)):
        char = code[i]
        if state is LexerState.IN_CALL or state is LexerState.IN_ARRAY:
            if char in _QUOTE_STATES:
                prev_state = state
                state = _QUOTE_STATES[char]
            elif char.isspace():
                continue
            elif state is LexerState.IN_CALL:
                if char == "[":
                    state = LexerState.IN_ARRAY
                else:
                    # First argument is a callback, or there is none.
                    return True
            elif char == "]":
                return False
            elif char == ",":
                continue
            else:
                raise AcceptedDepsError(i)
        elif state in _CLOSING_QUOTES:
            if char == _CLOSING_QUOTES[state]:
                urls.add(current_dep)
                current_dep = ""
                if prev_state is LexerState.IN_CALL:
                    # accept('./dep.js', cb) names exactly one dependency.
                    return False
                state = prev_state
            elif (
                state is LexerState.IN_TEMPLATE_STRING
                and char == "$"
                and code[i + 1 : i + 2] == "{"
            ):
                raise AcceptedDepsError(i)
            else:
                current_dep += char
        else:
            msg = "unknown lexer state"
            raise RuntimeError(msg)

    return False


@dataclass(frozen=True, slots=True)
class AcceptedDeps:
    """Everything a module declared through ``import.meta.hot.accept()``.

    Attributes:
        urls: Accepted dependency specifiers, across all calls.
        self_accepts: At least one call made the module self-accepting.
        calls: Number of ``accept()`` calls found.

    """

    urls: frozenset[str]
    self_accepts: bool
    calls: int


def scan_accepted_deps(code: str) -> AcceptedDeps:
    """Find every ``import.meta.hot.accept(`` call in *code* and lex it."""
    urls: set[str] = set()
    self_accepts = False
    calls = 0
    for match in _ACCEPT_CALL_RE.finditer(code):
        calls += 1
        if lex_accepted_hmr_deps(code, match.end(), urls):
            self_accepts = True
    return AcceptedDeps(urls=frozenset(urls), self_accepts=self_accepts, calls=calls)
