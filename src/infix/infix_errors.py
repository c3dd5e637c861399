"""
Error types raised while building expression trees.

Classes:
    ParseError: Base class for every failure detected during parsing. It is a
        `SyntaxError` so callers that already catch syntax errors keep working.
    UnexpectedEnd: The stream ran out where an operand, operator or `)` was required.
    UnmatchedParen: A `(` has no matching `)`, or a `)` has no matching `(`.
    UnexpectedToken: A token of the wrong kind appears where another kind was required.
    UnknownOperator: An operator symbol has no entry in the precedence table.
    ExpressionTooDeep: An expression is too long or nested to parse recursively.
    TableError: A precedence table configuration is invalid.

Every ParseError carries the token index where parsing stopped, so front ends
can point at the offending token.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from infix.infix_lexer import Token


class ParseError(SyntaxError):
    """Raised when a token sequence cannot be turned into a tree.

    Attributes:
        index (int | None): Index of the offending token in the input sequence.
        token (Token | None): The offending token, when there is one.
        reason (str): The message without position information.
    """

    def __init__(
        self, reason: str, index: int | None = None, token: Token | None = None
    ) -> None:
        self.reason = reason
        self.index = index
        self.token = token
        super().__init__(self._format())

    def _format(self) -> str:
        where: list[str] = []
        if self.index is not None:
            where.append(f"token {self.index}")
        if self.token is not None and self.token.line:
            where.append(f"line {self.token.line}, col {self.token.col}")
        if not where:
            return self.reason
        return f"{self.reason} (at {', '.join(where)})"

    def __str__(self) -> str:
        return self._format()


class UnexpectedEnd(ParseError):
    """The token stream was exhausted too early."""


class UnmatchedParen(ParseError):
    """A parenthesis has no partner."""


class UnexpectedToken(ParseError):
    """A token of the wrong kind was found."""


class UnknownOperator(ParseError):
    """An operator symbol is missing from the precedence table.

    Attributes:
        symbol (str): The operator that could not be ranked.
    """

    def __init__(
        self, symbol: str, index: int | None = None, token: Token | None = None
    ) -> None:
        self.symbol = symbol
        super().__init__(f"Unknown operator {symbol!r}", index, token)


class ExpressionTooDeep(ParseError):
    """The expression nests deeper than the interpreter's recursion limit."""


class TableError(Exception):
    """Invalid precedence table configuration.

    Attributes:
        problems (list[str]): One entry per rejected symbol or rank.

    Example:
        raise TableError("Invalid precedence table", ["'+' → rank -1 is negative"])
    """

    def __init__(self, message: str, problems: list[str] | None = None):
        super().__init__(message)
        self.problems = problems or []
