import pytest
from hypothesis import given
from hypothesis import strategies as st

from edl.edl_lexer import CharacterStream, Lexer, ListTokenStream, Token, tokenize


def kinds(source: str) -> list[str]:
    return [tok.type for tok in tokenize(source)[:-1]]


def values(source: str) -> list[str]:
    return [tok.value for tok in tokenize(source)[:-1]]


def test_punctuation_tokens() -> None:
    assert kinds("{ } ( ) [ ] ; : , ?") == [
        "LBRACE",
        "RBRACE",
        "LPAREN",
        "RPAREN",
        "LBRACK",
        "RBRACK",
        "SEMICOLON",
        "COLON",
        "COMMA",
        "QMARK",
    ]


@pytest.mark.parametrize(
    "source,expected",
    [
        ("+", "PLUS"),
        ("++", "INCREMENT"),
        ("+=", "ASSOP"),
        ("<<=", "ASSOP"),
        ("<<", "LSH"),
        ("<=>", "THREEWAY"),
        ("<>", "NOTEQUAL"),
        ("!=", "NOTEQUAL"),
        ("&&", "AND"),
        ("^^", "XOR"),
        ("->", "ARROW"),
        ("->*", "ARROW_STAR"),
        (".*", "DOT_STAR"),
        ("::", "SCOPEACCESS"),
        ("##", "M_CONCAT"),
        ("#", "M_STRINGIFY"),
    ],
)
def test_operators_use_longest_match(source: str, expected: str) -> None:
    assert kinds(source) == [expected]


def test_adjacent_operators_split_on_longest_prefix() -> None:
    assert kinds("!!x") == ["BANG", "BANG", "IDENT"]
    assert kinds("a---b") == ["IDENT", "DECREMENT", "MINUS", "IDENT"]


@pytest.mark.parametrize(
    "word,expected",
    [
        ("if", "IF"),
        ("then", "THEN"),
        ("begin", "LBRACE"),
        ("end", "RBRACE"),
        ("and", "AND"),
        ("not", "NOT"),
        ("div", "DIV"),
        ("mod", "MOD"),
        ("var", "TYPE_NAME"),
        ("globalvar", "GLOBAL"),
        ("local", "LOCAL"),
        ("repeat", "REPEAT"),
        ("until", "UNTIL"),
        ("struct", "STRUCT"),
        ("If", "IDENT"),
        ("_tmp1", "IDENT"),
    ],
)
def test_keywords_are_case_sensitive(word: str, expected: str) -> None:
    assert kinds(word) == [expected]


@pytest.mark.parametrize(
    "source,expected",
    [
        ("42", "DECLITERAL"),
        ("3.25", "DECLITERAL"),
        (".5", "DECLITERAL"),
        ("0x1F", "HEXLITERAL"),
        ("$ff", "HEXLITERAL"),
        ("0b101", "BINLITERAL"),
        ("017", "OCTLITERAL"),
        ("0", "DECLITERAL"),
        ("09", "ERROR"),
        ("0xZZ", "ERROR"),
    ],
)
def test_number_literals(source: str, expected: str) -> None:
    tokens = tokenize(source)
    assert tokens[0].type == expected
    assert tokens[0].value == source


def test_strings_keep_their_quotes() -> None:
    tokens = tokenize("\"hello\" 'c' \"a\\\"b\"")
    assert [(t.type, t.value) for t in tokens[:-1]] == [
        ("STRINGLIT", '"hello"'),
        ("CHARLIT", "'c'"),
        ("STRINGLIT", '"a\\"b"'),
    ]


def test_unterminated_string_is_an_error_token() -> None:
    tokens = tokenize('"abc')
    assert tokens[0].type == "ERROR"
    assert tokens[1].type == "EOF"


def test_comments_are_skipped() -> None:
    assert values("a // line\nb /* block\n */ c") == ["a", "b", "c"]


def test_unterminated_block_comment_is_an_error_token() -> None:
    tokens = tokenize("x /* never closed")
    assert [t.type for t in tokens] == ["IDENT", "ERROR", "EOF"]


def test_unknown_character_is_an_error_token() -> None:
    tokens = tokenize("a @ b")
    assert tokens[1] == Token("ERROR", "@", 1, 3)


def test_line_and_column_tracking() -> None:
    tokens = tokenize("x = 1\n  y")
    assert (tokens[3].value, tokens[3].line, tokens[3].col) == ("y", 2, 3)
    assert (tokens[-1].line, tokens[-1].col) == (2, 4)


def test_lexer_keeps_returning_eof() -> None:
    lexer = Lexer(CharacterStream(""))
    assert lexer.next().type == "EOF"
    assert lexer.next().type == "EOF"


def test_token_str_quotes_lexeme() -> None:
    assert str(Token("IDENT", "foo", 1, 1)) == "`foo`"
    assert str(Token("EOF", "EOF", 1, 1)) == "end of code"


def test_token_repr_and_eq() -> None:
    t1 = Token("DECLITERAL", "42", 1, 2)
    t2 = Token("DECLITERAL", "42", 1, 2)
    t3 = Token("IDENT", "x")

    assert repr(t1) == "Token(DECLITERAL, 42)"
    assert t1 == t2
    assert t1 != t3
    assert len({t1, t2, t3}) == 2


def test_character_stream_next_past_eof_raises() -> None:
    stream = CharacterStream("")
    with pytest.raises(EOFError, match="past end of EDL source"):
        stream.next()


def test_list_token_stream_pads_with_eof() -> None:
    stream = ListTokenStream([Token("IDENT", "a", 1, 1)])
    assert stream.next().value == "a"
    first_eof = stream.next()
    assert first_eof.type == "EOF"
    assert (first_eof.line, first_eof.col) == (1, 1)
    assert stream.next().type == "EOF"


def test_list_token_stream_reuses_trailing_eof() -> None:
    eof = Token("EOF", "EOF", 3, 7)
    stream = ListTokenStream([eof])
    assert stream.next() is eof
    assert stream.next() is eof


@given(st.text(alphabet=st.characters(blacklist_categories=["Cs"]), max_size=100))  # type: ignore[misc]
def test_lexer_never_raises_and_ends_with_eof(text: str) -> None:
    tokens = tokenize(text)
    assert tokens[-1].type == "EOF"
    assert all(t.type != "EOF" for t in tokens[:-1])
