"""
Shared constants for the infix expression parser.

Token types:
    OPERAND, OPERATOR, LPAREN, RPAREN are the four kinds the parser consumes.
    EOF is the end-of-stream sentinel emitted by the lexer.

Precedence:
    DEFAULT_PRECEDENCE is the arithmetic table used when the caller does not
    supply one. Higher rank binds tighter; every operator is left-associative.
"""

OPERAND = "OPERAND"
OPERATOR = "OPERATOR"
LPAREN = "LPAREN"
RPAREN = "RPAREN"
EOF = "EOF"

DEFAULT_PRECEDENCE: dict[str, int] = {
    "+": 1,
    "-": 1,
    "*": 2,
    "/": 2,
    "^": 3,
}

# Characters that can never be part of an operator symbol, besides whitespace
RESERVED_CHARS = frozenset("()")

# Environment variable the CLI reads for a precedence file
PRECEDENCE_ENV = "INFIX_PRECEDENCE"
