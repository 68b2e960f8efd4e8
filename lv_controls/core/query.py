"""
Evaluation of textual constraints against a DataFrame.

Understands the predicate language the producers emit:

    [contains(Name,'hose') or Status='Active'][Price < 20]

Every bracketed predicate must hold. Inside a predicate, comparisons are
combined with `or`, `and`, `not(...)` and parentheses. String literals use
single or double quotes; a doubled quote inside a literal stands for one
quote character.
"""

from __future__ import annotations

import logging
import re
from typing import List, Sequence, Tuple, Union

import pandas as pd

from .constraints import SortSpec
from .exceptions import QuerySyntaxError
from .list_view import QuerySource, apply_sorting, compare_series

logger = logging.getLogger(__name__)

Token = Tuple[str, Union[str, int, float]]

_TOKEN_RE = re.compile(
    r"""\s*(?:
        (?P<string>'(?:[^']|'')*'|"(?:[^"]|"")*")
      | (?P<number>-?\d+(?:\.\d+)?)
      | (?P<op>!=|<=|>=|=|<|>)
      | (?P<punct>[\[\](),])
      | (?P<name>[A-Za-z_][A-Za-z0-9_./]*)
    )""",
    re.VERBOSE,
)

_OPERATORS = {
    "=": "equals",
    "!=": "notEquals",
    "<": "lessThan",
    "<=": "lessThanOrEquals",
    ">": "greaterThan",
    ">=": "greaterThanOrEquals",
}


def tokenize(text: str) -> List[Token]:
    tokens: List[Token] = []
    text = text.rstrip()
    pos = 0
    while pos < len(text):
        match = _TOKEN_RE.match(text, pos)
        if match is None:
            raise QuerySyntaxError(f"Unexpected character {text[pos]!r} at position {pos}")
        kind = match.lastgroup
        raw = match.group(kind)
        if kind == "string":
            value: Union[str, int, float] = raw[1:-1].replace(raw[0] * 2, raw[0])
        elif kind == "number":
            value = float(raw) if "." in raw else int(raw)
        else:
            value = raw
        tokens.append((kind, value))
        pos = match.end()
    return tokens


class _Parser:
    """Recursive descent over the token list, producing boolean row masks."""

    def __init__(self, tokens: List[Token], df: pd.DataFrame) -> None:
        self.tokens = tokens
        self.pos = 0
        self.df = df

    # -- token helpers --------------------------------------------------
    def _peek(self) -> Token | None:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def _next(self) -> Token:
        token = self._peek()
        if token is None:
            raise QuerySyntaxError("Unexpected end of constraint")
        self.pos += 1
        return token

    def _expect(self, kind: str, value: str | None = None) -> Token:
        token = self._next()
        if token[0] != kind or (value is not None and token[1] != value):
            expected = value if value is not None else kind
            raise QuerySyntaxError(f"Expected {expected!r}, got {token[1]!r}")
        return token

    def _at_keyword(self, word: str) -> bool:
        token = self._peek()
        return token is not None and token[0] == "name" and str(token[1]).lower() == word

    def _at_call(self, name: str) -> bool:
        nxt = self.tokens[self.pos + 1] if self.pos + 1 < len(self.tokens) else None
        return self._at_keyword(name) and nxt == ("punct", "(")

    # -- grammar ----------------------------------------------------------
    def parse(self) -> pd.Series:
        mask = pd.Series(True, index=self.df.index)
        while self._peek() is not None:
            self._expect("punct", "[")
            mask &= self._or()
            self._expect("punct", "]")
        return mask

    def _or(self) -> pd.Series:
        mask = self._and()
        while self._at_keyword("or"):
            self.pos += 1
            mask = mask | self._and()
        return mask

    def _and(self) -> pd.Series:
        mask = self._term()
        while self._at_keyword("and"):
            self.pos += 1
            mask = mask & self._term()
        return mask

    def _term(self) -> pd.Series:
        token = self._peek()
        if token == ("punct", "("):
            self.pos += 1
            mask = self._or()
            self._expect("punct", ")")
            return mask

        if self._at_call("not"):
            self.pos += 2
            mask = self._or()
            self._expect("punct", ")")
            return ~mask

        if self._at_call("contains"):
            self.pos += 2
            attribute = str(self._expect("name")[1])
            self._expect("punct", ",")
            value = self._literal()
            self._expect("punct", ")")
            return self._compare(attribute, "contains", value)

        attribute = str(self._expect("name")[1])
        op = str(self._expect("op")[1])
        return self._compare(attribute, _OPERATORS[op], self._literal())

    def _literal(self) -> Union[str, int, float]:
        token = self._next()
        if token[0] not in ("string", "number"):
            raise QuerySyntaxError(f"Expected a literal, got {token[1]!r}")
        return token[1]

    def _compare(self, attribute: str, operator: str, value: Union[str, int, float]) -> pd.Series:
        if attribute not in self.df.columns:
            logger.warning("Constraint on unknown attribute", extra={"attribute": attribute})
            return pd.Series(False, index=self.df.index)

        series = self.df[attribute]
        if operator in ("equals", "notEquals") and not isinstance(value, str):
            numeric = pd.to_numeric(series, errors="coerce")
            return numeric == value if operator == "equals" else numeric != value
        return compare_series(series, operator, value)


def constraint_mask(df: pd.DataFrame, constraints: str) -> pd.Series:
    """Boolean row mask for a textual constraint; "" keeps every row."""
    return _Parser(tokenize(constraints), df).parse()


def dataframe_query_source(data: pd.DataFrame) -> QuerySource:
    """A query source answering textual requests from an in-memory DataFrame."""

    def _query(constraints: str, sorting: Sequence[SortSpec]) -> pd.DataFrame:
        rows = data[constraint_mask(data, constraints)]
        return apply_sorting(rows, sorting)

    return _query
