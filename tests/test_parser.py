import logging

import pytest
from hypothesis import given
from hypothesis import strategies as st

from edl import edl_parser
from edl.edl_ast import ASTNode
from edl.edl_config import DEFAULT_MAX_DEPTH, ParserConfig
from edl.edl_constants import token_hashmap
from edl.edl_diagnostics import DiagnosticCollector
from edl.edl_lexer import CharacterStream, Lexer, tokenize
from edl.edl_parser import Parser, parse_source


def parse(
    source: str, dialect: str = "strict", max_depth: int = DEFAULT_MAX_DEPTH
) -> tuple[ASTNode, DiagnosticCollector]:
    sink = DiagnosticCollector()
    root = Parser(tokenize(source), sink, dialect=dialect, max_depth=max_depth).parse()
    return root, sink


def sx(node: ASTNode | None) -> str:
    """Compact s-expression view of a tree, without positions."""
    if node is None:
        return "None"
    if node.kind == "literal":
        return str(node.value.value)  # type: ignore[union-attr]
    parts = [node.kind]
    if isinstance(node.value, ASTNode):
        parts.append(sx(node.value))
    elif node.value is not None:
        parts.append(str(node.value))
    if node.type:
        parts.append(f"type={node.type}")
    if node.prefix is False:
        parts.append("postfix")
    parts.extend(sx(c) for c in node.children)
    if node.else_children:
        parts.append("else")
        parts.extend(sx(c) for c in node.else_children)
    return "(" + " ".join(parts) + ")"


def statements(source: str, dialect: str = "strict") -> list[str]:
    """Parses error-free source and returns its top-level statements."""
    root, sink = parse(source, dialect)
    assert sink.diagnostics == []
    return [sx(s) for s in root.children]


def single(source: str) -> str:
    result = statements(source)
    assert len(result) == 1
    return result[0]


identifiers = st.from_regex(r"[a-z_][a-z0-9_]{0,8}", fullmatch=True).filter(
    lambda s: s not in token_hashmap
)


@given(literal=st.one_of(identifiers, st.integers(0, 10**9).map(str)))  # type: ignore[misc]
def test_single_literal_parses_to_literal_at_eof(literal: str) -> None:
    sink = DiagnosticCollector()
    parser = Parser(tokenize(literal), sink)
    node = parser.parse_expression()
    assert node is not None
    assert node.kind == "literal"
    assert node.value.value == literal  # type: ignore[union-attr]
    assert parser.token.type == "EOF"
    assert len(sink) == 0


BINARY_OPERATORS = [
    ("||", "OR", 4),
    ("^^", "XOR", 5),
    ("&&", "AND", 6),
    ("|", "PIPE", 7),
    ("^", "CARET", 8),
    ("&", "AMPERSAND", 9),
    ("==", "EQUALS", 10),
    ("!=", "NOTEQUAL", 10),
    ("<", "LESS", 11),
    (">=", "GREATEREQUAL", 11),
    ("<<", "LSH", 12),
    (">>", "RSH", 12),
    ("+", "PLUS", 13),
    ("-", "MINUS", 13),
    ("*", "STAR", 14),
    ("/", "SLASH", 14),
    ("mod", "MOD", 14),
]


@given(  # type: ignore[misc]
    first=st.sampled_from(BINARY_OPERATORS), second=st.sampled_from(BINARY_OPERATORS)
)
def test_binary_operators_nest_by_precedence(
    first: tuple[str, str, int], second: tuple[str, str, int]
) -> None:
    op1, kind1, level1 = first
    op2, kind2, level2 = second
    result = single(f"a {op1} b {op2} c")
    if level1 >= level2:
        assert result == f"(binary {kind2} (binary {kind1} a b) c)"
    else:
        assert result == f"(binary {kind1} a (binary {kind2} b c))"


@pytest.mark.parametrize(
    "source,expected",
    [
        ("a + b * c", "(binary PLUS a (binary STAR b c))"),
        ("a - b - c", "(binary MINUS (binary MINUS a b) c)"),
        ("a = b = c", "(binary ASSIGN a (binary ASSIGN b c))"),
        ("a, b = c", "(binary COMMA a (binary ASSIGN b c))"),
        ("x += 1", "(binary += x 1)"),
        ("a ? b : c ? d : e", "(ternary a b (ternary c d e))"),
        ("x = a ? b : c", "(binary ASSIGN x (ternary a b c))"),
        ("-a * b", "(binary STAR (unary MINUS a) b)"),
        ("!a.b", "(unary BANG (binary DOT a b))"),
        ("not a and b", "(binary AND (unary NOT a) b)"),
        ("- -a", "(unary MINUS (unary MINUS a))"),
        ("++i", "(unary INCREMENT i)"),
        ("i++ + 1", "(binary PLUS (unary INCREMENT postfix i) 1)"),
        ("*p = &q", "(binary ASSIGN (unary STAR p) (unary AMPERSAND q))"),
        ("(a + b) * c", "(binary STAR (paren (binary PLUS a b)) c)"),
        ("a div b mod c", "(binary MOD (binary DIV a b) c)"),
        ("a < b == c", "(binary EQUALS (binary LESS a b) c)"),
        ("a || b ^^ c && d", "(binary OR a (binary XOR b (binary AND c d)))"),
        ("p->q.*r", "(binary DOT_STAR (binary ARROW p q) r)"),
        ("a::b(c)", "(call (binary SCOPEACCESS a b) c)"),
        ("::x", "(unary SCOPEACCESS x)"),
        ("[1, 2, [3]]", "(array 1 2 (array 3))"),
        ("[]", "(array)"),
        ("f()", "(call f)"),
        (
            "f(a, b = 1)[i, j].k++",
            "(unary INCREMENT postfix "
            "(binary DOT (index (call f a (binary ASSIGN b 1)) i j) k))",
        ),
        ('s = "hi" + \'c\'', "(binary ASSIGN s (binary PLUS \"hi\" 'c'))"),
        ("$ff + 0x10 + 0b11 + 017 + .5", None),
    ],
)
def test_expression_shapes(source: str, expected: str | None) -> None:
    result = single(source)
    if expected is not None:
        assert result == expected


@pytest.mark.parametrize(
    "source,expected",
    [
        ("x = 1; y = 2", ["(binary ASSIGN x 1)", "(binary ASSIGN y 2)"]),
        ("x = 1 y = 2", ["(binary ASSIGN x 1)", "(binary ASSIGN y 2)"]),
        ("begin a end", ["(block a)"]),
        ("{ a; { b } }", ["(block a (block b))"]),
        ("if (a) b; else c;", ["(if (paren a) b else c)"]),
        ("if a then b else c", ["(if a b else c)"]),
        ("if (a) if (b) x; else y;", ["(if (paren a) (if (paren b) x else y))"]),
        ("while (x) x--;", ["(while while (paren x) (unary DECREMENT postfix x))"]),
        ("until x == 0 x -= 1", ["(while until (binary EQUALS x 0) (binary -= x 1))"]),
        (
            "do x++; until (x > 3);",
            ["(do until (unary INCREMENT postfix x) (paren (binary GREATER x 3)))"],
        ),
        ("do { x++ } while (x < 3)", ["(do while (block (unary INCREMENT postfix x)) (paren (binary LESS x 3)))"]),
        ("repeat (3) f();", ["(repeat (paren 3) (call f))"]),
        ("with (other) y = 1;", ["(with (paren other) (binary ASSIGN y 1))"]),
        (
            "for (var i = 0; i < 10; i += 1) s += i;",
            [
                "(for (declaration type=var (binary ASSIGN i 0)) (binary LESS i 10) "
                "(binary += i 1) (binary += s i))"
            ],
        ),
        ("for (;;) break;", ["(for (block) (block) (block) (break))"]),
        (
            "switch (k) { case 1: x = 1; break; default: x = 2; }",
            [
                "(switch (paren k) (block (case case 1) (binary ASSIGN x 1) (break) "
                "(case default) (binary ASSIGN x 2)))"
            ],
        ),
        ("return x + 1;", ["(return (binary PLUS x 1))"]),
        ("return; exit", ["(return)", "(exit)"]),
        ("while (1) { continue }", ["(while while (paren 1) (block (continue)))"]),
        ("local var a = 1, b;", ["(declaration LOCAL type=var (binary ASSIGN a 1) b)"]),
        ("globalvar g;", ["(declaration GLOBAL g)"]),
        ("unsigned int n", ["(declaration type=unsigned int n)"]),
    ],
)
def test_statement_shapes(source: str, expected: list[str]) -> None:
    assert statements(source) == expected


def test_empty_statement_warns_and_yields_empty_block() -> None:
    root, sink = parse("x;;")
    assert [sx(s) for s in root.children] == ["x", "(block)"]
    assert [d.severity for d in sink.diagnostics] == ["warning"]
    assert sink.messages() == [
        "Statement doesn't do anything (consider using `{}` instead of `;`)"
    ]


@pytest.mark.parametrize(
    "source,messages,tree",
    [
        ("(a", ["Expected closing parenthesis before end of code"], ["(paren a)"]),
        (",", ["Expected expression before comma"], []),
        ("a +", ["Expected expression following binary operator `+`"], ["a"]),
        ("x = ;", ["Expected expression following binary operator `=`"], ["x"]),
        ("- ;", ["Expected expression following unary operator"], []),
        ("()", ["Expected expression within parentheses"], []),
        ("a ?", ["Expected expression following ternary operator ?"], ["a"]),
        ("a ? b", ["Expected colon in ternary expression before end of code"], ["a"]),
        ("a ? b :", ["Expected expression following `:` in ternary expression"], ["a"]),
        ("a.", ["Expected member name following `.` before end of code"], ["a"]),
        ("f(a", ["Expected closing parenthesis before end of code"], ["(call f a)"]),
        ("a[1", ["Expected closing `]` for array subscript"], ["(index a 1)"]),
        ("a[]", ["Expected array subscript"], ["a"]),
        ("[1, 2", ["Expected closing `]` for array"], ["(array 1 2)"]),
        (": x", ["Expected label or ternary expression before colon"], ["x"]),
        ("= 1", ["Expected assignable expression before assignment operator"], ["1"]),
        (".x", ["Expected expression before member access"], ["x"]),
        ("? a", ["Expected expression before ternary operator ?"], ["a"]),
        ("/ 2", ["Expected expression before binary operator `/`"], ["2"]),
        (")", ["Unmatched closing parenthesis"], []),
        ("]", ["Unmatched closing bracket"], []),
        ("}", ["Unmatched closing brace"], []),
        ("a } b", ["Unmatched closing brace"], ["a", "b"]),
        ("else x", ["`else` statement not paired with an `if`"], ["x"]),
        ("then", ["`then` statement not paired with an `if`"], []),
        ("new Foo", ["Internal error: Unsupported C++ keyword"], ["Foo"]),
        ("#x", ["Internal error: Unhandled preprocessing token"], ["x"]),
        ("@", ["Internal error: Bad token"], []),
        ("{ a; b", ["Expected closing brace"], ["(block a b)"]),
        ("{ ) }", ["Unmatched closing parenthesis"], ["(block)"]),
        ("case 1: x", ["`case` label not within a `switch` statement"], ["(case case 1)", "x"]),
        ("default: x", ["`default` label not within a `switch` statement"], ["(case default)", "x"]),
        (
            "switch (k) { case 1 x = 1; }",
            ["Expected colon following `case` label before `x`"],
            ["(switch (paren k) (block (case case 1) (binary ASSIGN x 1)))"],
        ),
        (
            "switch (k) { case : x; }",
            ["Expected label or ternary expression before colon"],
            ["(switch (paren k) (block x))"],
        ),
        (
            "switch (k) x;",
            ["Expected `{` to begin `switch` body before `x`"],
            ["(switch (paren k) x)"],
        ),
        ("do x;", ["Expected `while` or `until` after `do` body before end of code"], []),
        (
            "for i = 0; i < 3; i++) x;",
            ["Expected `(` after `for` before `i`"],
            ["(for (binary ASSIGN i 0) (binary LESS i 3) (unary INCREMENT postfix i) x)"],
        ),
        (
            "for (i = 0 i < 3; i++) x;",
            ["Expected `;` in `for` header before `i`"],
            ["(for (binary ASSIGN i 0) (binary LESS i 3) (unary INCREMENT postfix i) x)"],
        ),
        (
            "for (;; x",
            [
                "Expected closing parenthesis before end of code",
                "Expected statement for `for` body before end of code",
            ],
            ["(for (block) (block) x (block))"],
        ),
        ("if (a)", ["Expected statement for `if` body before end of code"], ["(if (paren a) (block))"]),
        ("if {}", ["Expected condition following `if` before `{`"], []),
        (
            "if (a) else b;",
            ["Expected statement for `if` body before `else`"],
            ["(if (paren a) (block) else b)"],
        ),
        ("var;", ["Expected declarator before `;`"], []),
        ("::1", ["Expected identifier following `::` before `1`"], ["1"]),
    ],
)
def test_error_recovery(source: str, messages: list[str], tree: list[str]) -> None:
    root, sink = parse(source)
    assert sink.messages() == messages
    assert all(d.severity == "error" for d in sink.diagnostics)
    assert [sx(s) for s in root.children] == tree


def test_one_diagnostic_per_mistake() -> None:
    root, sink = parse("a +; )\nb = c")
    assert sink.messages() == [
        "Expected expression following binary operator `+`",
        "Unmatched closing parenthesis",
    ]
    assert [sx(s) for s in root.children] == ["a", "(binary ASSIGN b c)"]


def test_diagnostic_positions_point_at_offending_token() -> None:
    _, sink = parse("x = 1\ny = (2")
    (diag,) = sink.diagnostics
    assert (diag.line, diag.col) == (2, 7)
    assert str(diag) == "2:7: error: Expected closing parenthesis before end of code"


def test_bare_comma_consumes_exactly_one_token() -> None:
    sink = DiagnosticCollector()
    parser = Parser(tokenize(", x"), sink)
    assert parser.parse_expression() is None
    assert parser.consumed == 1
    assert parser.token.value == "x"
    assert sink.messages() == ["Expected expression before comma"]


def test_semicolon_operand_is_not_consumed() -> None:
    sink = DiagnosticCollector()
    parser = Parser(tokenize(";"), sink)
    node = parser.parse_expression()
    assert node is not None and node.kind == "block" and node.children == []
    assert parser.token.type == "SEMICOLON"


def test_closing_delimiter_yields_no_operand() -> None:
    sink = DiagnosticCollector()
    parser = Parser(tokenize(")"), sink)
    assert parser.try_parse_operand() is None
    assert parser.token.type == "RPAREN"
    assert len(sink) == 0


def test_parse_block_requires_brace_lookahead() -> None:
    sink = DiagnosticCollector()
    parser = Parser(tokenize("{ a b }"), sink)
    assert sx(parser.parse_block()) == "(block a b)"
    assert parser.token.type == "EOF"


def test_root_block_position_is_first_token() -> None:
    root, _ = parse("\n\n  x")
    assert (root.kind, root.line, root.col) == ("block", 3, 3)


def test_deep_parentheses_report_once() -> None:
    depth = 10000
    root, sink = parse("(" * depth + "a" + ")" * depth + "; b")
    assert sink.messages() == [f"Nesting too deep (maximum depth is {DEFAULT_MAX_DEPTH})"]
    assert [sx(s) for s in root.children] == ["b"]


def test_deep_blocks_report_once() -> None:
    depth = 5000
    root, sink = parse("{" * depth + "}" * depth + " x", max_depth=100)
    assert sink.messages() == ["Nesting too deep (maximum depth is 100)"]
    assert sx(root.children[-1]) == "x"


def test_deep_unary_chain_is_reported_not_raised() -> None:
    root, sink = parse("-" * 500 + "a", max_depth=50)
    assert sink.messages()
    assert set(sink.messages()) == {"Nesting too deep (maximum depth is 50)"}
    assert root.kind == "block"


def test_deep_switches_at_default_limit_are_reported() -> None:
    depth = 250
    root, sink = parse("switch (x) {" * depth + "}" * depth)
    assert set(sink.messages()) == {f"Nesting too deep (maximum depth is {DEFAULT_MAX_DEPTH})"}
    assert [s.kind for s in root.children] == ["switch"]


def test_long_operator_chain_is_cut_at_limit() -> None:
    root, sink = parse("x = " + "a + " * 2999 + "a; y")
    assert sink.messages() == [f"Nesting too deep (maximum depth is {DEFAULT_MAX_DEPTH})"]
    assert [sx(s) for s in root.children][1:] == ["y"]
    assign = root.children[0]
    assert (assign.kind, assign.value) == ("binary", "ASSIGN")


def test_operator_chain_within_limit_is_accepted() -> None:
    root, sink = parse("a + " * 50 + "a", max_depth=100)
    assert len(sink) == 0
    node = root.children[0]
    for _ in range(50):
        assert node.kind == "binary"
        node = node.children[0]
    assert sx(node) == "a"


def test_depth_overflow_leaves_closer_for_enclosing_call() -> None:
    root, sink = parse("f(())", max_depth=3)
    assert sink.messages() == ["Nesting too deep (maximum depth is 3)"]
    assert root.children[0].kind == "call"


def test_depth_overflow_at_stray_closer_rejects_it_once() -> None:
    root, sink = parse("{)}", max_depth=1)
    assert sink.messages() == [
        "Nesting too deep (maximum depth is 1)",
        "Unmatched closing parenthesis",
    ]
    assert [sx(s) for s in root.children] == ["(block)"]


def test_global_is_not_an_operand() -> None:
    root, sink = parse("global.x = 1;")
    assert sink.messages() == ["Expected expression before member access"]
    assert [s.kind for s in root.children] == ["binary"]


def test_nesting_within_limit_is_accepted() -> None:
    root, sink = parse("(" * 40 + "a" + ")" * 40, max_depth=50)
    assert len(sink) == 0
    node = root.children[0]
    for _ in range(40):
        assert node.kind == "paren"
        node = node.children[0]
    assert sx(node) == "a"


@pytest.mark.parametrize("max_depth", [0, -3, 10**9])
def test_unusable_depth_limit_raises(max_depth: int) -> None:
    with pytest.raises(ValueError, match="max_depth"):
        Parser([], DiagnosticCollector(), max_depth=max_depth)


def test_unknown_dialect_raises() -> None:
    with pytest.raises(ValueError, match="Unknown dialect"):
        Parser([], DiagnosticCollector(), dialect="pascal")


def test_empty_token_list_parses_to_empty_block() -> None:
    sink = DiagnosticCollector()
    root = edl_parser.parse([], sink)
    assert root == ASTNode("block", children=[], line=0, col=0)
    assert len(sink) == 0


def test_parser_reads_from_lexer_stream() -> None:
    sink = DiagnosticCollector()
    lexer = Lexer(CharacterStream("a = b"))
    root = Parser(lexer, sink).parse()
    assert [sx(s) for s in root.children] == ["(binary ASSIGN a b)"]


def test_from_config_applies_settings() -> None:
    config = ParserConfig(dialect="gml", max_depth=42)
    parser = Parser.from_config(tokenize("x"), DiagnosticCollector(), config)
    assert parser.dialect == "gml"
    assert parser.max_depth == 42


def test_parse_source_returns_tree_and_diagnostics() -> None:
    root, sink = parse_source("if (a) * (b) = 1", ParserConfig(dialect="quirks"))
    assert [sx(s) for s in root.children] == [
        "(if (paren a) (binary ASSIGN (unary STAR (paren b)) 1))"
    ]
    assert [d.severity for d in sink.diagnostics] == ["warning"]


def test_parse_logs_progress(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="edl.edl_parser"):
        parse("x = 1")
    assert "parsing compilation unit (dialect=strict)" in caplog.text
    assert "parsed 1 top-level statement(s) with 0 error(s)" in caplog.text
