"""
formula.py
----------
➗ Evaluates charge formulas such as ``(<Consumption> - 10) * 0.25 + <Meter Charge_1" or 25mm>``.

Purpose:
--------
Replaces a generic string ``eval`` with a small arithmetic interpreter.
Variables are written as tokens (the name wrapped in ``<`` and ``>``)
and are looked up by exact name, so ``<Meter>`` can never match inside
``<Meter_Size>``.

Grammar:
--------
    expr   := term (('+' | '-') term)*
    term   := unary (('*' | '/' | '%') unary)*
    unary  := ('+' | '-') unary | atom
    atom   := NUMBER | '<' name '>' | '(' expr ')'

Numbers follow floating-point semantics: division by zero yields ±inf
(or nan for 0/0) and ``%`` is the remainder with the sign of the dividend.

Outputs:
--------
- Float, or INVALID when the formula cannot be parsed or references an
  unknown variable. ``evaluate`` never raises.
"""

import math
import re
from typing import Dict, List, Optional, Tuple

from charge_engine.calculation.models import INVALID, Amount
from charge_engine.utils.logger import get_logger

logger = get_logger(__name__)


class FormulaError(ValueError):
    """Raised when a formula cannot be parsed or evaluated."""

    def __init__(self, message: str, text: str, position: Optional[int] = None) -> None:
        pointer = ""
        if position is not None and 0 <= position <= len(text):
            pointer = f"\n{text}\n{' ' * position}^"
        super().__init__(f"{message}{pointer}")
        self.text = text
        self.position = position


class UnknownVariableError(FormulaError):
    """Raised when a token names a variable missing from the namespace."""


# Variable token: the name wrapped in angle brackets.
VAR_PATTERN = r"<([^>]*)>"
VAR_RE = re.compile(VAR_PATTERN)

# Nesting allowed for parentheses and unary signs.
MAX_DEPTH = 100

_TOKEN_RE = re.compile(
    r"""
    (?P<space>\s+)
    |(?P<lpar>\()
    |(?P<rpar>\))
    |(?P<op>[+\-*/%])
    |(?P<num>(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)
    |(?P<var>""" + VAR_PATTERN + r""")
    """,
    re.VERBOSE,
)

# (kind, text, start)
Token = Tuple[str, str, int]


def _tokenize(text: str) -> List[Token]:
    tokens: List[Token] = []
    pos = 0
    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        if not match:
            raise FormulaError(f"Unexpected character '{text[pos]}' in formula", text, pos)
        if match.lastgroup != "space":
            tokens.append((match.lastgroup, match.group(0), match.start()))
        pos = match.end()
    return tokens


# ---------------------------------------------------------------------
# Floating-point operators
# ---------------------------------------------------------------------
def _divide(a: float, b: float) -> float:
    if b == 0:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


def _remainder(a: float, b: float) -> float:
    if b == 0 or math.isinf(a) or math.isnan(a) or math.isnan(b):
        return math.nan
    return math.fmod(a, b)


_OPS = {
    "+": lambda a, b: a + b,
    "-": lambda a, b: a - b,
    "*": lambda a, b: a * b,
    "/": _divide,
    "%": _remainder,
}


class _Parser:
    def __init__(self, text: str, namespace: Dict[str, float]) -> None:
        self.text = text
        self.namespace = namespace
        self.tokens = _tokenize(text)
        self.index = 0
        self.depth = 0

    def peek(self) -> Optional[Token]:
        if self.index >= len(self.tokens):
            return None
        return self.tokens[self.index]

    def pop(self, expected: Optional[str] = None) -> Token:
        token = self.peek()
        if token is None:
            raise FormulaError("Unexpected end of formula", self.text, len(self.text))
        kind, value, start = token
        if expected and kind != expected:
            raise FormulaError(f"Expected {expected} but found '{value}'", self.text, start)
        self.index += 1
        return token

    def parse(self) -> float:
        value = self._expr()
        token = self.peek()
        if token is not None:
            raise FormulaError(f"Unexpected token '{token[1]}'", self.text, token[2])
        return value

    def _expr(self) -> float:
        value = self._term()
        while True:
            token = self.peek()
            if token and token[0] == "op" and token[1] in "+-":
                self.pop("op")
                value = _OPS[token[1]](value, self._term())
            else:
                return value

    def _term(self) -> float:
        value = self._unary()
        while True:
            token = self.peek()
            if token and token[0] == "op" and token[1] in "*/%":
                self.pop("op")
                value = _OPS[token[1]](value, self._unary())
            else:
                return value

    def _unary(self) -> float:
        token = self.peek()
        if self.depth >= MAX_DEPTH:
            position = token[2] if token else len(self.text)
            raise FormulaError(f"Formula nested deeper than {MAX_DEPTH} levels", self.text, position)
        self.depth += 1
        try:
            if token and token[0] == "op" and token[1] in "+-":
                self.pop("op")
                operand = self._unary()
                return -operand if token[1] == "-" else operand
            return self._atom()
        finally:
            self.depth -= 1

    def _atom(self) -> float:
        token = self.peek()
        if token is None:
            raise FormulaError("Unexpected end of formula", self.text, len(self.text))
        kind, value, start = token
        if kind == "lpar":
            self.pop("lpar")
            inner = self._expr()
            self.pop("rpar")
            return inner
        if kind == "num":
            self.pop("num")
            return float(value)
        if kind == "var":
            self.pop("var")
            name = value[1:-1]
            if name not in self.namespace:
                raise UnknownVariableError(f"Unknown variable '{name}'", self.text, start)
            return float(self.namespace[name])
        raise FormulaError(f"Unexpected token '{value}'", self.text, start)


def parse_formula(expression: str, namespace: Dict[str, float]) -> float:
    """Evaluate ``expression`` strictly, raising FormulaError on failure."""
    return _Parser(str(expression), namespace).parse()


def evaluate(expression: str, namespace: Dict[str, float]) -> Amount:
    """
    Evaluate a formula against a namespace snapshot.

    Parameters
    ----------
    expression : str
        Arithmetic expression with ``<name>`` tokens.
    namespace : dict
        Variable name → value. Not modified.

    Returns
    -------
    float | INVALID
    """
    try:
        return parse_formula(expression, namespace)
    except (FormulaError, RecursionError) as e:
        logger.warning(f"⚠️ Invalid formula {expression!r}: {e}")
        return INVALID


def referenced_names(expression: str) -> List[str]:
    """Variable names a formula refers to, in order of first appearance."""
    names: List[str] = []
    for name in VAR_RE.findall(str(expression)):
        if name not in names:
            names.append(name)
    return names
