"""
Infix Expression Parser

Parses a flat sequence of tokens into a precedence-correct binary expression tree.

The parser is plain right-recursive descent: after reading an operand and an
operator it parses the whole remainder of the expression and only then
decides how the operator fits in. On the way back out of every recursive call
`combine` rotates the freshly parsed operand and operator down the left edge
of the already-correct right-hand tree until they sit under every operator
that binds at least as loosely. The result is correct for each sub-range as
soon as it is returned, so there is no separate fix-up pass over the whole tree.

Supported Constructs
--------------------
- Operands: any OPERAND token becomes a `Leaf`.
- Binary operators: every symbol registered in the `PrecedenceTable`, all
  left-associative. Operators sharing a rank associate with each other.
- Parentheses: `( ... )` becomes a `Parenthesized` node that rotation never
  looks inside.

Entry Points
------------
- `parse()`: Parse tokens into a precedence-correct tree.
- `parse_naive()`: Parse tokens into the right-skewed tree descent alone builds.
- `rebalance()`: Repair a naive tree in a separate pass.
- `parse_source()`: Tokenize and parse a string.
- `combine()`: The rotation step on its own.

Raises
------
ParseError
    `UnexpectedEnd`, `UnmatchedParen`, `UnexpectedToken`, `UnknownOperator`
    or `ExpressionTooDeep`, carrying the index of the token where parsing
    stopped.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from infix.infix_ast import BinaryOp, Leaf, Parenthesized, Tree
from infix.infix_constants import LPAREN, OPERAND, OPERATOR, RPAREN
from infix.infix_errors import (
    ExpressionTooDeep,
    UnexpectedEnd,
    UnexpectedToken,
    UnknownOperator,
    UnmatchedParen,
)
from infix.infix_lexer import Token, TokenStream, tokenize
from infix.infix_precedence import PrecedenceTable

logger = logging.getLogger(__name__)


def combine(left: Tree, op: str, right: Tree, table: PrecedenceTable) -> Tree:
    """Joins `left op right` where `right` is already precedence-correct.

    If `right` is an operand, a parenthesized group, or an operator binding
    strictly tighter than `op`, it stays whole as the right operand.
    Otherwise `op` binds at least as tightly as `right`'s root: `left op` is
    combined with `right`'s left child and the result replaces that child.
    Ties rotate, which makes equal-rank operators left-associative.

    Args:
        left: The operand to the left of `op`.
        op: A registered operator symbol.
        right: The tree parsed from everything after `op`.
        table: Ranks for `op` and the operators in `right`.

    Returns:
        A new tree. `left`, `right.right` and every `Parenthesized` node are
        reused as they are.
    """
    if not isinstance(right, BinaryOp) or table.binds_tighter(right.op, op):
        return BinaryOp(op, left, right)
    logger.debug("rotate %r under %r", op, right.op)
    return BinaryOp(right.op, combine(left, op, right.left, table), right.right)


def rebalance(tree: Tree, precedence: PrecedenceTable | None = None) -> Tree:
    """Repairs a naive right-skewed tree in a separate pass.

    Walks the right spine of `tree` bottom-up, applying `combine` at every
    operator, and repairs the inside of each parenthesized group first.
    For any token sequence, `rebalance(parse_naive(t)) == parse(t)`.
    """
    table = PrecedenceTable.arithmetic() if precedence is None else precedence
    if isinstance(tree, Parenthesized):
        return Parenthesized(rebalance(tree.child, table), tree.line, tree.col)
    if isinstance(tree, BinaryOp):
        return combine(
            rebalance(tree.left, table), tree.op, rebalance(tree.right, table), table
        )
    return tree


class Parser:
    """
    Infix Parser Class

    Turns a token sequence into an expression tree.

    Attributes
    ----------
    stream : TokenStream
        Cursor over the input tokens.
    table : PrecedenceTable
        Operator ranks used to validate operators and to rotate.
    naive : bool
        When True the rotation step is skipped and the right-skewed tree
        of plain recursive descent is returned.

    Methods
    -------
    parse() -> Tree
        Parse the whole token sequence.
    parse_expr(stream) -> Tree
        Parse operands and operators until `stream` is exhausted.
    parse_atom(stream) -> Tree
        Parse one operand or one parenthesized group.
    """

    def __init__(
        self,
        tokens: Iterable[Token],
        precedence: PrecedenceTable | None = None,
        naive: bool = False,
    ) -> None:
        self.stream = TokenStream(tokens)
        self.table = PrecedenceTable.arithmetic() if precedence is None else precedence
        self.naive = naive

    def parse(self) -> Tree:
        """Parse the whole token sequence into one tree.

        Raises:
            UnexpectedEnd: If there are no tokens at all.
            ExpressionTooDeep: If the input is too long or nested for the
                recursion limit.
        """
        if self.stream.at_end():
            raise UnexpectedEnd("Empty expression", self.stream.position)
        try:
            tree = self.parse_expr(self.stream)
        except RecursionError:
            raise ExpressionTooDeep(
                "Expression nests too deeply", self.stream.position
            ) from None
        logger.debug("parsed %d tokens", self.stream.position)
        return tree

    def parse_expr(self, stream: TokenStream) -> Tree:
        left = self.parse_atom(stream)
        if stream.at_end():
            return left

        index = stream.position
        tok = stream.consume()
        if tok.type == RPAREN:
            # spans inside parentheses are balanced, so this `)` closes nothing
            raise UnmatchedParen("Unmatched ')'", index, tok)
        if tok.type != OPERATOR:
            raise UnexpectedToken(
                f"Expected an operator, got {tok.type.lower()} {tok.value!r}",
                index,
                tok,
            )
        if tok.value not in self.table:
            raise UnknownOperator(tok.value, index, tok)

        if stream.at_end():
            raise UnexpectedEnd(
                f"Expected an operand after {tok.value!r}", stream.position, tok
            )
        right = self.parse_expr(stream)
        if self.naive:
            return BinaryOp(tok.value, left, right)
        return combine(left, tok.value, right, self.table)

    def parse_atom(self, stream: TokenStream) -> Tree:
        index = stream.position
        tok = stream.peek()
        if tok is None:
            raise UnexpectedEnd("Expected an operand or '('", index)

        if tok.type == OPERAND:
            stream.consume()
            return Leaf(tok.value, tok.line, tok.col)

        if tok.type == LPAREN:
            close = stream.find_matching(index)
            if close is None:
                raise UnmatchedParen("Unmatched '('", index, tok)
            stream.consume()
            inner = stream.window(close)
            if inner.at_end():
                raise UnexpectedEnd("Empty parentheses", close, stream.tokens[close])
            child = self.parse_expr(inner)
            stream.skip_to(close + 1)
            return Parenthesized(child, tok.line, tok.col)

        if tok.type == RPAREN:
            raise UnmatchedParen("Unmatched ')'", index, tok)

        raise UnexpectedToken(
            f"Expected an operand or '(', got {tok.type.lower()} {tok.value!r}",
            index,
            tok,
        )


def parse(tokens: Iterable[Token], precedence: PrecedenceTable | None = None) -> Tree:
    """Parse `tokens` into a precedence-correct tree."""
    return Parser(tokens, precedence).parse()


def parse_naive(
    tokens: Iterable[Token], precedence: PrecedenceTable | None = None
) -> Tree:
    """Parse `tokens` with recursive descent alone, ignoring precedence."""
    return Parser(tokens, precedence, naive=True).parse()


def parse_source(source: str, precedence: PrecedenceTable | None = None) -> Tree:
    """Tokenize `source` with the operators of `precedence`, then parse it."""
    table = PrecedenceTable.arithmetic() if precedence is None else precedence
    return parse(tokenize(source, table), table)
