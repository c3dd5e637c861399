"""
Lexical analysis and token streams for infix expressions.

This module converts raw expression text into tokens and provides the cursor
the parser consumes them through:

Classes:
    CharacterStream: Stream abstraction for reading characters with line/column tracking.
    Token: Represents a single token with type, value, and source location.
    Lexer: Converts a CharacterStream into a sequence of tokens.
    TokenStream: Position-aware peek/consume cursor over a token sequence.

Features:
    - Skips whitespace
    - Identifiers and numbers (integer and decimal) become OPERAND tokens
    - `(` and `)` become LPAREN and RPAREN
    - Longest-match recognition of the operators registered in a precedence
      table, including alphabetic ones such as `mod`
    - Any other character becomes a single-character OPERATOR token, so the
      parser can report it as an unknown operator with its position

Raises:
    UnexpectedToken: If a malformed number such as `1.2.3` is encountered.

Example:
    >>> tokenize("a * (b + 1)")
    [Token(OPERAND, a), Token(OPERATOR, *), Token(LPAREN, (), Token(OPERAND, b), Token(OPERATOR, +), Token(OPERAND, 1), Token(RPAREN, ))]
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from typing import Any

from infix.infix_constants import EOF, LPAREN, OPERAND, OPERATOR, RPAREN
from infix.infix_errors import UnexpectedToken
from infix.infix_precedence import PrecedenceTable


class CharacterStream:
    """
    A cursor over expression text that tracks line and column.

    Attributes:
        source (str): The input source string.
        position (int): Current index in the source.
        line (int): Current line number (1-indexed).
        column (int): Current column number (1-indexed).
    """

    def __init__(self, source: str, position: int = 0, line: int = 1, column: int = 1):
        self.source = source
        self.position = position
        self.line = line
        self.column = column

    def next(self) -> str:
        """
        Consumes and returns the next character in the stream.

        Raises:
            EOFError: If reading past the end of the source.
        """
        if self.end_of_file():
            raise EOFError(
                f"Attempted to read past end of source at line {self.line}, col {self.column}"
            )
        char = self.source[self.position]
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.position += 1
        return char

    def peek(self, offset: int = 0) -> str:
        """Returns the character at `offset` without advancing, or "" when out of bounds."""
        index = self.position + offset
        if index < 0 or index >= len(self.source):
            return ""
        return self.source[index]

    def startswith(self, text: str) -> bool:
        return self.source.startswith(text, self.position)

    def location(self) -> tuple[int, int]:
        """Returns the (line, column) of the next character."""
        return self.line, self.column

    def take_while(self, accept: Callable[[str], bool]) -> str:
        """Consumes characters while `accept` holds and returns them."""
        start = self.position
        while not self.end_of_file() and accept(self.peek()):
            self.next()
        return self.source[start : self.position]

    def end_of_file(self) -> bool:
        return self.position >= len(self.source)


class Token:
    """A single lexical token.

    Attributes:
        type (str): One of OPERAND, OPERATOR, LPAREN, RPAREN or EOF.
        value (str): The raw text of the token.
        line (int): The 1-based line number where the token appears (0 if unknown).
        col (int): The 1-based column number where the token starts (0 if unknown).
    """

    def __init__(self, type_: str, value: str, line: int = 0, col: int = 0):
        self.type = type_
        self.value = value
        self.line = line
        self.col = col

    @classmethod
    def operand(cls, value: str) -> Token:
        return cls(OPERAND, value)

    @classmethod
    def operator(cls, symbol: str) -> Token:
        return cls(OPERATOR, symbol)

    @classmethod
    def lparen(cls) -> Token:
        return cls(LPAREN, "(")

    @classmethod
    def rparen(cls) -> Token:
        return cls(RPAREN, ")")

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.value})"

    def __eq__(self, other: Any) -> bool:
        return (
            isinstance(other, Token)
            and self.type == other.type
            and self.value == other.value
            and self.line == other.line
            and self.col == other.col
        )

    def __hash__(self) -> int:
        return hash((self.type, self.value, self.line, self.col))


def _is_word_char(ch: str) -> bool:
    return ch.isalnum() or ch == "_"


class Lexer:
    """Lexical analyzer for infix expressions.

    Attributes:
        stream (CharacterStream): The source stream to tokenize.
        operators (list[str]): Operator symbols to match, longest first.
    """

    def __init__(
        self, stream: CharacterStream, table: PrecedenceTable | None = None
    ) -> None:
        self.stream = stream
        self.operators: list[str] = (
            PrecedenceTable.arithmetic() if table is None else table
        ).symbols()

    def peek(self) -> str:
        return self.stream.peek()

    def advance(self) -> str:
        return self.stream.next()

    def skip_whitespace(self) -> None:
        self.stream.take_while(str.isspace)

    def match_operator(self) -> Token | None:
        """Attempts to match the longest registered operator at the current position.

        Alphabetic operators only match on a word boundary, so `modulo` stays
        an operand even when `mod` is an operator.

        Returns:
            Token | None: An OPERATOR token if a match is found, otherwise None.
        """
        line, col = self.stream.location()
        for sym in self.operators:
            if not self.stream.startswith(sym):
                continue
            if sym[-1].isalnum() and _is_word_char(self.stream.peek(len(sym))):
                continue
            for _ in sym:
                self.advance()
            return Token(OPERATOR, sym, line, col)
        return None

    def read_number(self) -> str:
        """Reads digits with at most one decimal point.

        Raises:
            UnexpectedToken: If a second decimal point follows.
        """
        line, col = self.stream.location()
        num = self.stream.take_while(str.isdigit)
        if self.peek() == ".":
            num += self.advance() + self.stream.take_while(str.isdigit)
            if self.peek() == ".":
                raise UnexpectedToken(
                    f"Invalid number {num + '.'!r}",
                    token=Token(OPERAND, num, line, col),
                )
        return num

    def next_token(self) -> Token:
        """Consumes and returns the next Token from the stream.

        Returns:
            Token: The next token, or an EOF token once the source is exhausted.

        Raises:
            UnexpectedToken: If a number contains more than one decimal point.
        """
        self.skip_whitespace()
        line, col = self.stream.location()

        if self.stream.end_of_file():
            return Token(EOF, EOF, line, col)

        ch = self.peek()

        # 1. Parentheses
        if ch == "(":
            self.advance()
            return Token(LPAREN, ch, line, col)
        if ch == ")":
            self.advance()
            return Token(RPAREN, ch, line, col)

        # 2. Registered operator, including word operators
        token = self.match_operator()
        if token:
            return token

        # 3. Identifier
        if ch.isalpha() or ch == "_":
            return Token(OPERAND, self.stream.take_while(_is_word_char), line, col)

        # 4. Number
        if ch.isdigit():
            return Token(OPERAND, self.read_number(), line, col)

        # 5. Unknown character, left for the parser to reject as an operator
        return Token(OPERATOR, self.advance(), line, col)

    def tokens(self) -> list[Token]:
        """Reads the remaining source, excluding the EOF sentinel."""
        result: list[Token] = []
        while True:
            tok = self.next_token()
            if tok.type == EOF:
                return result
            result.append(tok)


def tokenize(source: str, table: PrecedenceTable | None = None) -> list[Token]:
    """Splits `source` into tokens using the operators registered in `table`."""
    return Lexer(CharacterStream(source, 0, 1, 1), table).tokens()


class TokenStream:
    """
    A cursor over a pre-tokenized sequence.

    The stream is bounded by `end`: positions at or past it count as
    exhausted, as does an EOF sentinel token. Bounded views created with
    `window` share the underlying token list and report positions as indices
    into it, so errors raised while parsing a parenthesized span still point
    at the right token of the whole input.

    Attributes:
        tokens (Sequence[Token]): The full token sequence.
        position (int): Index of the next token to consume.
        end (int): Index one past the last token this stream may consume.
    """

    def __init__(
        self, tokens: Iterable[Token], position: int = 0, end: int | None = None
    ) -> None:
        self.tokens: Sequence[Token] = (
            tokens if isinstance(tokens, (list, tuple)) else list(tokens)
        )
        self.position = position
        self.end = len(self.tokens) if end is None else end

    def at_end(self) -> bool:
        return self.position >= self.end or self.tokens[self.position].type == EOF

    def peek(self) -> Token | None:
        """Returns the next token without consuming it, or None when exhausted."""
        if self.at_end():
            return None
        return self.tokens[self.position]

    def consume(self) -> Token:
        """Consumes and returns the next token.

        Raises:
            IndexError: If the stream is exhausted. Callers check `at_end` first.
        """
        if self.at_end():
            raise IndexError(f"Token stream exhausted at position {self.position}")
        tok = self.tokens[self.position]
        self.position += 1
        return tok

    def find_matching(self, open_index: int) -> int | None:
        """Returns the index of the `)` matching the `(` at `open_index`, or None."""
        depth = 0
        for index in range(open_index, self.end):
            kind = self.tokens[index].type
            if kind == EOF:
                break
            if kind == LPAREN:
                depth += 1
            elif kind == RPAREN:
                depth -= 1
                if depth == 0:
                    return index
        return None

    def window(self, end: int) -> TokenStream:
        """Returns a view over `[position, end)` sharing this stream's tokens."""
        return TokenStream(self.tokens, self.position, end)

    def skip_to(self, index: int) -> None:
        self.position = index

    def __repr__(self) -> str:
        return f"TokenStream(position={self.position}, end={self.end})"


__all__ = ["CharacterStream", "Lexer", "Token", "TokenStream", "tokenize"]
