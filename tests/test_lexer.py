import pytest
from hypothesis import given
from hypothesis import strategies as st

from infix.infix_errors import UnexpectedToken
from infix.infix_lexer import CharacterStream, Lexer, Token, TokenStream, tokenize
from infix.infix_precedence import PrecedenceTable


def types(source: str, table: PrecedenceTable | None = None) -> list[str]:
    return [t.type for t in tokenize(source, table)]


def values(source: str, table: PrecedenceTable | None = None) -> list[str]:
    return [t.value for t in tokenize(source, table)]


def test_single_char_tokens() -> None:
    assert types("+ - * / ^ ( )") == [
        "OPERATOR",
        "OPERATOR",
        "OPERATOR",
        "OPERATOR",
        "OPERATOR",
        "LPAREN",
        "RPAREN",
    ]


def test_operands() -> None:
    assert tokenize("abc 42 3.14 _x1") == [
        Token("OPERAND", "abc", 1, 1),
        Token("OPERAND", "42", 1, 5),
        Token("OPERAND", "3.14", 1, 8),
        Token("OPERAND", "_x1", 1, 13),
    ]


def test_no_whitespace_needed() -> None:
    assert values("a*(b+1)") == ["a", "*", "(", "b", "+", "1", ")"]


def test_line_and_column_tracking() -> None:
    toks = tokenize("a +\n  b")
    assert [(t.line, t.col) for t in toks] == [(1, 1), (1, 3), (2, 3)]


def test_longest_operator_match() -> None:
    table = PrecedenceTable({"*": 2, "**": 3, "+": 1})
    assert values("a ** b * c", table) == ["a", "**", "b", "*", "c"]


def test_word_operator() -> None:
    table = PrecedenceTable.arithmetic().merged({"mod": 2})
    assert types("a mod b", table) == ["OPERAND", "OPERATOR", "OPERAND"]


def test_word_operator_needs_word_boundary() -> None:
    table = PrecedenceTable.arithmetic().merged({"mod": 2})
    assert types("modulo + model", table) == ["OPERAND", "OPERATOR", "OPERAND"]


def test_unknown_character_becomes_operator() -> None:
    assert tokenize("a & b")[1] == Token("OPERATOR", "&", 1, 3)


def test_invalid_number() -> None:
    with pytest.raises(UnexpectedToken, match="Invalid number"):
        tokenize("1.2.3")


def test_lexer_emits_eof() -> None:
    lexer = Lexer(CharacterStream("a"))
    assert lexer.next_token().type == "OPERAND"
    assert lexer.next_token() == Token("EOF", "EOF", 1, 2)
    assert lexer.next_token().type == "EOF"


def test_character_stream_past_end() -> None:
    stream = CharacterStream("x")
    assert stream.next() == "x"
    assert stream.peek() == ""
    with pytest.raises(EOFError):
        stream.next()


def test_any_unicode_whitespace_separates_tokens() -> None:
    assert values("a +\vb\fc *\td") == ["a", "+", "b", "c", "*", "d"]
    assert types("a +\vb") == ["OPERAND", "OPERATOR", "OPERAND"]


def test_character_stream_take_while() -> None:
    stream = CharacterStream("ab12 c")
    assert stream.take_while(str.isalpha) == "ab"
    assert stream.take_while(str.isalpha) == ""
    assert stream.take_while(str.isalnum) == "12"
    assert stream.peek() == " "
    assert stream.location() == (1, 5)


def test_character_stream_location_across_lines() -> None:
    stream = CharacterStream("a\n b")
    stream.take_while(lambda ch: ch != "b")
    assert stream.location() == (2, 2)
    assert stream.next() == "b"
    assert stream.end_of_file()


def test_character_stream_startswith_and_peek_offset() -> None:
    stream = CharacterStream("a**b")
    stream.next()
    assert stream.startswith("**")
    assert not stream.startswith("*b")
    assert stream.peek(2) == "b"
    assert stream.peek(3) == ""


def test_token_constructors() -> None:
    assert Token.operand("a") == Token("OPERAND", "a")
    assert Token.operator("+") == Token("OPERATOR", "+")
    assert Token.lparen() == Token("LPAREN", "(")
    assert Token.rparen() == Token("RPAREN", ")")
    assert repr(Token.operand("a")) == "Token(OPERAND, a)"
    assert hash(Token.operand("a")) == hash(Token("OPERAND", "a", 0, 0))


def test_token_stream_peek_consume() -> None:
    stream = TokenStream(tokenize("a + b"))
    assert stream.peek() == stream.tokens[0]
    assert stream.consume().value == "a"
    assert stream.position == 1
    stream.consume()
    stream.consume()
    assert stream.at_end()
    assert stream.peek() is None
    with pytest.raises(IndexError):
        stream.consume()


def test_token_stream_stops_at_eof_sentinel() -> None:
    stream = TokenStream([Token.operand("a"), Token("EOF", "EOF"), Token.operand("b")])
    stream.consume()
    assert stream.at_end()


def test_token_stream_find_matching() -> None:
    stream = TokenStream(tokenize("(a * (b + c)) + (d"))
    assert stream.find_matching(0) == 8
    assert stream.find_matching(3) == 7
    assert stream.find_matching(10) is None


def test_token_stream_window() -> None:
    stream = TokenStream(tokenize("(a + b) * c"))
    stream.consume()
    inner = stream.window(4)
    assert [inner.consume().value for _ in range(3)] == ["a", "+", "b"]
    assert inner.at_end()
    assert inner.position == 4
    assert stream.position == 1
    stream.skip_to(5)
    assert stream.consume().value == "*"


@given(st.text(alphabet="abcxyz0123456789+-*/^() \n", max_size=60))  # type: ignore[misc]
def test_tokenize_never_loses_characters(source: str) -> None:
    joined = "".join(values(source))
    assert joined == "".join(source.split())


@given(st.text(alphabet=st.characters(blacklist_categories=["Cs"]), min_size=1))  # type: ignore[misc]
def test_tokenize_handles_arbitrary_text(source: str) -> None:
    try:
        toks = tokenize(source)
    except UnexpectedToken:
        return
    assert all(t.type in ("OPERAND", "OPERATOR", "LPAREN", "RPAREN") for t in toks)
