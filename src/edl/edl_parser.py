"""
EDL Language Parser

Parses a stream of EDL tokens into an abstract syntax tree (AST) while reporting,
rather than raising on, malformed input.

This module implements the recursive-descent front end of the EDL toolchain. It
pulls tokens one at a time from a token stream, builds `ASTNode` trees bottom-up,
and sends every syntax problem to a diagnostic sink. A source file with several
mistakes yields one diagnostic per mistake and one best-effort tree in a single
pass.

Supported Constructs
--------------------
- Expressions (precedence climbing, see `edl_precedence`):
    * Literals, identifiers, `( ... )` groups, `[a, b, c]` arrays
    * Prefix operators `+ - ! ~ not & * ++ --` and global scope `::x`
    * Binary operators from `,` and assignment down to `::`
    * Ternary `c ? a : b`
    * Postfix calls `f(a, b)`, subscripts `a[i, j]`, members `a.b` / `a->b`,
      and postfix `++` / `--`

- Statements:
    * Blocks `{ ... }` / `begin ... end`, the empty statement `;`
    * `if ... [then] ... [else ...]`, `for (init; cond; step)`,
      `while`, `until`, `do ... while|until ...`, `repeat`, `with`
    * `switch` with `case` / `default` labels
    * `return`, `exit`, `break`, `continue`
    * Declarations `[local|global|globalvar] [type] a = 1, b`

Parser Behavior
---------------
- Single-token lookahead held in `self.token`; no backtracking.
- Never raises on user input. Missing delimiters are reported and assumed present;
  tokens that cannot start what is expected are reported and skipped.
- A follow-up diagnostic is not issued when the failure it would describe was
  already reported while parsing the missing part.
- Nesting deeper than `max_depth` is reported as "Nesting too deep" instead of
  exhausting the interpreter stack.
- The condition-header dialect ("strict", "quirks" or "gml") is fixed per parser.

Entry Points
------------
- `parse()`: Parse a full compilation unit into a root `block` node.
- `parse_statement()`: Parse one statement.
- `parse_expression(min_precedence)`: Parse one expression.
- `parse_source(source, ...)`: Lex and parse a string, returning the tree and diagnostics.
"""

from __future__ import annotations

import logging
import sys
from typing import Callable

from edl import edl_constants as tk
from edl.edl_ast import ASTNode
from edl.edl_config import DEFAULT_MAX_DEPTH, ParserConfig
from edl.edl_diagnostics import ERROR, WARNING, DiagnosticCollector, DiagnosticSink
from edl.edl_dialect import STRICT, get_header_policy
from edl.edl_lexer import CharacterStream, Lexer, ListTokenStream, Token, TokenStream
from edl.edl_precedence import (
    PREC_ALL,
    PREC_ARGUMENT,
    PREC_POSTFIX,
    PREC_SCOPE,
    PREC_TERNARY,
    PREC_UNARY_PREFIX,
    POSTFIX_TOKENS,
    binary_precedence,
    rhs_precedence,
)

logger = logging.getLogger(__name__)

# Interpreter frames used per counted nesting level, worst case (nested blocks and
# statement bodies). A `switch` body is one frame deeper, so it counts as a level of its own.
FRAMES_PER_LEVEL = 4

OPENERS = frozenset({tk.LPAREN, tk.LBRACK, tk.LBRACE})
CLOSERS = frozenset({tk.RPAREN, tk.RBRACK, tk.RBRACE})

# Tokens that end an operand list without being part of it.
OPERAND_TERMINATORS = frozenset(
    {tk.LBRACE, tk.RBRACE, tk.RPAREN, tk.RBRACK, tk.EOF}
)

# Tokens after which no expression follows a `return` / `exit`.
STATEMENT_ENDINGS = frozenset(
    {tk.SEMICOLON, tk.RBRACE, tk.RPAREN, tk.RBRACK, tk.EOF}
)

BINARY_ONLY_OPERATORS = frozenset(
    {
        tk.PERCENT,
        tk.PIPE,
        tk.CARET,
        tk.AND,
        tk.OR,
        tk.XOR,
        tk.DIV,
        tk.MOD,
        tk.SLASH,
        tk.EQUALS,
        tk.NOTEQUAL,
        tk.LESS,
        tk.GREATER,
        tk.LESSEQUAL,
        tk.GREATEREQUAL,
        tk.THREEWAY,
        tk.LSH,
        tk.RSH,
    }
)

UNARY_OPERATORS = frozenset({tk.PLUS, tk.MINUS, tk.BANG, tk.NOT, tk.TILDE})
POINTER_UNARY_OPERATORS = frozenset(
    {tk.STAR, tk.AMPERSAND, tk.INCREMENT, tk.DECREMENT}
)

# Operand-position tokens that are always reported, with the message for each.
MISPLACED_OPERAND_MESSAGES: dict[str, str] = {
    tk.COLON: "Expected label or ternary expression before colon",
    tk.COMMA: "Expected expression before comma",
    tk.ASSIGN: "Expected assignable expression before assignment operator",
    tk.ASSOP: "Expected assignable expression before assignment operator",
    tk.DOT: "Expected expression before member access",
    tk.ARROW: "Expected expression before member access",
    tk.DOT_STAR: "Expected expression before pointer-to-member",
    tk.ARROW_STAR: "Expected expression before pointer-to-member",
    tk.QMARK: "Expected expression before ternary operator ?",
}

# Statement-position tokens that can never start a statement.
REJECTED_STATEMENT_MESSAGES: dict[str, str] = {
    **{kind: "Internal error: Unhandled preprocessing token" for kind in tk.PREPROCESSING_TOKENS},
    **{kind: "Internal error: Unsupported C++ keyword" for kind in tk.FOREIGN_KEYWORDS},
    tk.ERROR: "Internal error: Bad token",
    tk.COMMA: "Expected expression before comma",
    tk.RPAREN: "Unmatched closing parenthesis",
    tk.RBRACK: "Unmatched closing bracket",
    tk.THEN: "`then` statement not paired with an `if`",
    tk.ELSE: "`else` statement not paired with an `if`",
}

EMPTY_STATEMENT_WARNING = (
    "Statement doesn't do anything (consider using `{}` instead of `;`)"
)


def is_missing(node: ASTNode | None) -> bool:
    """True for "no node" and for the zero-length operand produced by `;`."""
    return node is None or (node.kind == "block" and not node.children)


class Parser:
    """
    EDL Parser Class

    Turns a token stream into an AST, one lookahead token at a time.

    Attributes
    ----------
    token : Token
        The current lookahead token. Every parsing method leaves it on the first
        token it did not use.
    sink : DiagnosticSink
        Receives errors and warnings.
    policy : HeaderPolicy
        Condition-header policy for the selected dialect.
    dialect : str
        "strict", "quirks" or "gml".
    max_depth : int
        Deepest statement/expression nesting accepted before reporting.
    depth : int
        Current nesting depth.
    in_switch : bool
        Whether the parser is inside a `switch` body (for `case`/`default`).
    errors_reported : int
        Errors this parser has sent to the sink.
    statement_parsers : dict[str, Callable[[], ASTNode | None]]
        Dispatch table from statement keyword to its parser.

    Raises
    ------
    ValueError
        At construction, for an unknown dialect or an unusable depth limit.
    """

    def __init__(
        self,
        tokens: TokenStream | list[Token],
        sink: DiagnosticSink,
        dialect: str = STRICT,
        max_depth: int = DEFAULT_MAX_DEPTH,
    ) -> None:
        if isinstance(tokens, list):
            tokens = ListTokenStream(tokens)
        limit = sys.getrecursionlimit() // (FRAMES_PER_LEVEL + 1)
        if max_depth < 1 or max_depth > limit:
            raise ValueError(f"max_depth must be between 1 and {limit}, got {max_depth}")

        self.tokens: TokenStream = tokens
        self.sink = sink
        self.policy = get_header_policy(dialect)
        self.dialect: str = self.policy.name
        self.max_depth = max_depth
        self.depth = 0
        self.in_switch = False
        self.errors_reported = 0
        self.consumed = 0

        self.unary_ops: frozenset[str] = (
            UNARY_OPERATORS | POINTER_UNARY_OPERATORS
            if self.policy.unary_pointer_ops
            else UNARY_OPERATORS
        )

        self.statement_parsers: dict[str, Callable[[], ASTNode | None]] = {
            tk.IF: self.parse_if,
            tk.FOR: self.parse_for,
            tk.WHILE: self.parse_while,
            tk.UNTIL: self.parse_while,
            tk.DO: self.parse_do,
            tk.REPEAT: self.parse_repeat,
            tk.WITH: self.parse_with,
            tk.SWITCH: self.parse_switch,
            tk.CASE: self.parse_case,
            tk.DEFAULT: self.parse_case,
            tk.RETURN: self.parse_return,
            tk.EXIT: self.parse_return,
            tk.BREAK: self.parse_jump,
            tk.CONTINUE: self.parse_jump,
            tk.TYPE_NAME: self.parse_declaration,
            tk.LOCAL: self.parse_declaration,
            tk.GLOBAL: self.parse_declaration,
        }

        self.token: Token = self.tokens.next()

    @classmethod
    def from_config(
        cls, tokens: TokenStream | list[Token], sink: DiagnosticSink, config: ParserConfig
    ) -> Parser:
        return cls(tokens, sink, dialect=config.dialect, max_depth=config.max_depth)

    # -- token handling -----------------------------------------------------

    def advance(self) -> Token:
        """Consumes the lookahead token and returns it."""
        tok = self.token
        self.token = self.tokens.next()
        self.consumed += 1
        return tok

    def error(self, position: Token, message: str) -> None:
        self.errors_reported += 1
        self.sink.report(position, ERROR, message)

    def warning(self, position: Token, message: str) -> None:
        self.sink.report(position, WARNING, message)

    def match(self, *types: str, expected: str | None = None) -> Token | None:
        """Consumes the lookahead if its type is one of `types`.

        Otherwise reports `expected`, when given, and consumes nothing.
        """
        if self.token.type in types:
            return self.advance()
        if expected is not None:
            self.error(self.token, expected)
        return None

    def _reject(self, message: str) -> None:
        """Reports the lookahead token and consumes it. Always yields "no node"."""
        self.error(self.token, message)
        self.advance()

    def _report_too_deep(self) -> None:
        self.error(self.token, f"Nesting too deep (maximum depth is {self.max_depth})")

    def _enter(self) -> bool:
        if self.depth >= self.max_depth:
            self._report_too_deep()
            self._skip_group()
            return False
        self.depth += 1
        return True

    def _skip_group(self) -> None:
        """Consumes the balanced group starting at the lookahead, or one token.

        Closers and end of input are left for the enclosing construct.
        """
        if self.token.type in CLOSERS or self.token.type == tk.EOF:
            return
        if self.token.type not in OPENERS:
            self.advance()
            return
        balance = 0
        while self.token.type != tk.EOF:
            tok = self.advance()
            if tok.type in OPENERS:
                balance += 1
            elif tok.type in CLOSERS:
                balance -= 1
            if balance == 0:
                return

    def _skip_expression(self) -> None:
        """Consumes the rest of an expression, up to a statement ending or statement keyword."""
        while not (
            self.token.type in STATEMENT_ENDINGS
            or self.token.type in self.statement_parsers
            or self.token.type == tk.LBRACE
        ):
            self._skip_group()

    def _spine_full(self, spine: int) -> bool:
        """Whether a left-nested operator chain `spine` folds long has reached the depth limit.

        When it has, the limit is reported and the rest of the expression skipped.
        """
        if self.depth + spine < self.max_depth:
            return False
        self._report_too_deep()
        self._skip_expression()
        return True

    # -- compilation unit ---------------------------------------------------

    def parse(self) -> ASTNode:
        """Parse a full compilation unit and return its root `block` node."""
        first = self.token
        logger.debug("parsing compilation unit (dialect=%s)", self.dialect)

        statements: list[ASTNode] = []
        while self.token.type != tk.EOF:
            statements.extend(self._parse_statement_list())
            if self.token.type == tk.RBRACE:
                self._reject("Unmatched closing brace")

        logger.debug(
            "parsed %d top-level statement(s) with %d error(s)",
            len(statements),
            self.errors_reported,
        )
        return ASTNode("block", children=statements, line=first.line, col=first.col)

    # -- operands -----------------------------------------------------------

    def try_parse_operand(self) -> ASTNode | None:
        """Parse the smallest unit an expression can start with.

        Returns None without consuming anything at a closing delimiter, `{`, the
        end of input, or a keyword. Returns None after reporting and consuming the
        token when it can only appear in the middle of an expression.
        """
        tok = self.token
        kind = tok.type

        if kind in OPERAND_TERMINATORS:
            return None
        if kind == tk.SEMICOLON:
            return ASTNode.at(tok, "block")
        if kind in MISPLACED_OPERAND_MESSAGES:
            self._reject(MISPLACED_OPERAND_MESSAGES[kind])
            return None
        if kind in self.unary_ops:
            return self._parse_unary()
        if kind in BINARY_ONLY_OPERATORS or kind in (tk.STAR, tk.AMPERSAND):
            self._reject(f"Expected expression before binary operator `{tok.value}`")
            return None
        if kind in (tk.INCREMENT, tk.DECREMENT):
            self._reject(f"Expected expression before postfix operator `{tok.value}`")
            return None
        if kind == tk.LPAREN:
            return self._parse_parenthetical()
        if kind == tk.LBRACK:
            return self._parse_array()
        if kind in tk.LITERAL_TOKENS:
            self.advance()
            return ASTNode.at(tok, "literal", tok)
        if kind == tk.SCOPEACCESS:
            return self._parse_global_scope()

        # Keywords, type names, preprocessing leftovers and bad tokens belong to
        # the statement layer, which reports them in context.
        return None

    def _parse_unary(self) -> ASTNode | None:
        op = self.advance()
        mark = self.errors_reported
        operand = self.parse_expression(PREC_UNARY_PREFIX)
        if is_missing(operand):
            if self.errors_reported == mark:
                self.error(op, "Expected expression following unary operator")
            return None
        return ASTNode.at(op, "unary", op.type, [operand], prefix=True)

    def _parse_global_scope(self) -> ASTNode | None:
        op = self.advance()
        name = self.token
        if name.type != tk.IDENT:
            self.error(name, f"Expected identifier following `::` before {name}")
            return None
        operand = self.parse_expression(PREC_SCOPE)
        if operand is None:
            return None
        return ASTNode.at(op, "unary", tk.SCOPEACCESS, [operand], prefix=True)

    def _parse_parenthetical(self) -> ASTNode | None:
        open_tok = self.advance()
        mark = self.errors_reported
        inner = self.parse_expression(PREC_ALL)

        if is_missing(inner):
            if self.errors_reported == mark:
                self.error(self.token, "Expected expression within parentheses")
            self.match(tk.RPAREN)
            return None

        self.match(tk.RPAREN, expected=f"Expected closing parenthesis before {self.token}")
        return ASTNode.at(open_tok, "paren", children=[inner])  # type: ignore[list-item]

    def _parse_array(self) -> ASTNode:
        open_tok = self.advance()
        elements = self._parse_expression_list()
        self.match(tk.RBRACK, expected="Expected closing `]` for array")
        return ASTNode.at(open_tok, "array", children=elements)

    def _parse_expression_list(self) -> list[ASTNode]:
        """Comma-separated expressions, each stopping before a top-level comma."""
        items: list[ASTNode] = []
        while True:
            item = self.parse_expression(PREC_ARGUMENT)
            if is_missing(item):
                break
            items.append(item)  # type: ignore[arg-type]
            if self.token.type != tk.COMMA:
                break
            self.advance()
        return items

    # -- expressions --------------------------------------------------------

    def parse_expression(self, min_precedence: int = PREC_ALL) -> ASTNode | None:
        """Parse an operand and fold in every operator binding at least `min_precedence`.

        `PREC_ALL` reads a complete expression; `PREC_ARGUMENT` stops before a
        top-level comma. Returns None if no operand could be parsed.
        """
        if not self._enter():
            return None
        try:
            operand = self.try_parse_operand()
            if is_missing(operand):
                return operand
            return self.fold_operators(operand, min_precedence)  # type: ignore[arg-type]
        finally:
            self.depth -= 1

    def fold_operators(self, left: ASTNode, min_precedence: int) -> ASTNode:
        """Fold postfix, binary and ternary operators onto `left` (precedence climbing).

        Each fold nests `left` one level deeper, so the chain counts toward `max_depth`.
        """
        spine = 0
        while True:
            tok = self.token
            kind = tok.type

            if kind in POSTFIX_TOKENS and min_precedence <= PREC_POSTFIX:
                if self._spine_full(spine):
                    return left
                node = self._parse_postfix(left)
                if node is None:
                    return left
                left, spine = node, spine + 1
                continue

            if kind == tk.QMARK and min_precedence <= PREC_TERNARY:
                if self._spine_full(spine):
                    return left
                node = self._parse_ternary(left)
                if node is None:
                    return left
                left, spine = node, spine + 1
                continue

            level = binary_precedence(kind)
            if level is None or level < min_precedence:
                return left
            if self._spine_full(spine):
                return left

            self.advance()
            mark = self.errors_reported
            rhs = self.parse_expression(rhs_precedence(level))
            if is_missing(rhs):
                if self.errors_reported == mark:
                    self.error(
                        self.token,
                        f"Expected expression following binary operator `{tok.value}`",
                    )
                return left

            op = tok.value if kind == tk.ASSOP else kind
            left = ASTNode.at(tok, "binary", op, [left, rhs])  # type: ignore[list-item]
            spine += 1

    def _parse_ternary(self, condition: ASTNode) -> ASTNode | None:
        qmark = self.advance()
        mark = self.errors_reported
        then = self.parse_expression(PREC_ALL)
        if is_missing(then):
            if self.errors_reported == mark:
                self.error(self.token, "Expected expression following ternary operator ?")
            return None

        if self.token.type != tk.COLON:
            self.error(self.token, f"Expected colon in ternary expression before {self.token}")
            return None
        self.advance()

        mark = self.errors_reported
        otherwise = self.parse_expression(PREC_TERNARY)
        if is_missing(otherwise):
            if self.errors_reported == mark:
                self.error(self.token, "Expected expression following `:` in ternary expression")
            return None
        return ASTNode.at(qmark, "ternary", None, [condition, then, otherwise])  # type: ignore[list-item]

    def _parse_postfix(self, left: ASTNode) -> ASTNode | None:
        tok = self.token
        kind = tok.type

        if kind in (tk.INCREMENT, tk.DECREMENT):
            self.advance()
            return ASTNode.at(tok, "unary", kind, [left], prefix=False)

        if kind in (tk.DOT, tk.ARROW):
            self.advance()
            name = self.token
            if name.type != tk.IDENT:
                self.error(name, f"Expected member name following `{tok.value}` before {name}")
                return None
            self.advance()
            member = ASTNode.at(name, "literal", name)
            return ASTNode.at(tok, "binary", kind, [left, member])

        self.advance()
        if kind == tk.LPAREN:
            args = self._parse_expression_list()
            self.match(tk.RPAREN, expected=f"Expected closing parenthesis before {self.token}")
            return ASTNode.at(tok, "call", left, args)

        mark = self.errors_reported
        subscripts = self._parse_expression_list()
        self.match(tk.RBRACK, expected="Expected closing `]` for array subscript")
        if not subscripts:
            if self.errors_reported == mark:
                self.error(tok, "Expected array subscript")
            return None
        return ASTNode.at(tok, "index", left, subscripts)

    # -- statements ---------------------------------------------------------

    def parse_statement(self) -> ASTNode | None:
        """Parse one statement, or return None at `}` / end of input or after an error."""
        if not self._enter():
            return None
        try:
            return self._dispatch_statement()
        finally:
            self.depth -= 1

    def _dispatch_statement(self) -> ASTNode | None:
        tok = self.token
        kind = tok.type

        if kind in (tk.RBRACE, tk.EOF):
            return None
        if kind in REJECTED_STATEMENT_MESSAGES:
            self._reject(REJECTED_STATEMENT_MESSAGES[kind])
            return None
        if kind == tk.SEMICOLON:
            self.warning(tok, EMPTY_STATEMENT_WARNING)
            self.advance()
            return ASTNode.at(tok, "block")
        if kind == tk.LBRACE:
            return self.parse_block()

        handler = self.statement_parsers.get(kind)
        if handler is not None:
            return handler()

        # Anything else either starts an expression or is reported by the
        # operand parser as misplaced.
        expr = self.parse_expression(PREC_ALL)
        self.match(tk.SEMICOLON)
        return expr

    def _parse_statement_list(self) -> list[ASTNode]:
        statements: list[ASTNode] = []
        while self.token.type not in (tk.RBRACE, tk.EOF):
            before = self.consumed
            stmt = self.parse_statement()
            if stmt is not None:
                statements.append(stmt)
            elif self.consumed == before:
                # Only a closer left in place by a depth overflow gets here.
                self._reject(
                    REJECTED_STATEMENT_MESSAGES.get(
                        self.token.type, f"Unexpected {self.token} at start of statement"
                    )
                )
        return statements

    def parse_block(self) -> ASTNode:
        """Parse a `{ ... }` block; the lookahead must be the opening brace."""
        open_tok = self.advance()
        statements = self._parse_statement_list()
        self.match(tk.RBRACE, expected="Expected closing brace")
        return ASTNode.at(open_tok, "block", children=statements)

    def _parse_header(self, keyword: Token) -> ASTNode | None:
        mark = self.errors_reported
        header = self.policy.read_header(self, keyword)
        if is_missing(header):
            if self.errors_reported == mark:
                self.error(
                    self.token,
                    f"Expected condition following `{keyword.value}` before {self.token}",
                )
            return None
        return header

    def _parse_body(self, keyword: Token) -> ASTNode:
        start = self.token
        mark = self.errors_reported
        body = None
        if start.type != tk.ELSE:
            body = self.parse_statement()
        if body is None:
            if self.errors_reported == mark:
                self.error(
                    self.token,
                    f"Expected statement for `{keyword.value}` body before {self.token}",
                )
            return ASTNode.at(start, "block")
        return body

    def parse_if(self) -> ASTNode | None:
        """Parse `if cond [then] stmt [else stmt]`."""
        keyword = self.advance()
        header = self._parse_header(keyword)
        self.match(tk.THEN)
        body = self._parse_body(keyword)

        else_children: list[ASTNode] = []
        if self.token.type == tk.ELSE:
            else_tok = self.advance()
            else_children.append(self._parse_body(else_tok))

        if header is None:
            return None
        return ASTNode.at(keyword, "if", None, [header, body], else_children=else_children)

    def parse_while(self) -> ASTNode | None:
        """Parse `while cond stmt` or `until cond stmt`."""
        keyword = self.advance()
        header = self._parse_header(keyword)
        body = self._parse_body(keyword)
        if header is None:
            return None
        return ASTNode.at(keyword, "while", keyword.type.lower(), [header, body])

    def parse_repeat(self) -> ASTNode | None:
        """Parse `repeat count stmt`."""
        keyword = self.advance()
        header = self._parse_header(keyword)
        body = self._parse_body(keyword)
        if header is None:
            return None
        return ASTNode.at(keyword, "repeat", None, [header, body])

    def parse_with(self) -> ASTNode | None:
        """Parse `with target stmt`."""
        keyword = self.advance()
        header = self._parse_header(keyword)
        body = self._parse_body(keyword)
        if header is None:
            return None
        return ASTNode.at(keyword, "with", None, [header, body])

    def parse_do(self) -> ASTNode | None:
        """Parse `do stmt while cond` or `do stmt until cond`."""
        keyword = self.advance()
        body = self._parse_body(keyword)

        if self.token.type not in (tk.WHILE, tk.UNTIL):
            self.error(
                self.token,
                f"Expected `while` or `until` after `do` body before {self.token}",
            )
            return None
        loop_tok = self.advance()
        header = self._parse_header(loop_tok)
        self.match(tk.SEMICOLON)
        if header is None:
            return None
        return ASTNode.at(keyword, "do", loop_tok.type.lower(), [body, header])

    def parse_for(self) -> ASTNode:
        """Parse `for (init; cond; step) stmt`; each clause may be empty."""
        keyword = self.advance()
        self.match(tk.LPAREN, expected=f"Expected `(` after `for` before {self.token}")

        init = self._parse_for_clause(tk.SEMICOLON, allow_declaration=True)
        self.match(tk.SEMICOLON, expected=f"Expected `;` in `for` header before {self.token}")
        condition = self._parse_for_clause(tk.SEMICOLON)
        self.match(tk.SEMICOLON, expected=f"Expected `;` in `for` header before {self.token}")
        step = self._parse_for_clause(tk.RPAREN)

        self.match(tk.RPAREN, expected=f"Expected closing parenthesis before {self.token}")

        body = self._parse_body(keyword)
        return ASTNode.at(keyword, "for", None, [init, condition, step, body])

    def _parse_for_clause(self, terminator: str, allow_declaration: bool = False) -> ASTNode:
        start = self.token
        clause: ASTNode | None = None
        if start.type == terminator:
            return ASTNode.at(start, "block")
        if allow_declaration and start.type in tk.DECLARATION_TOKENS:
            clause = self._parse_declaration(terminated=False)
        else:
            clause = self.parse_expression(PREC_ALL)
        if is_missing(clause):
            return ASTNode.at(start, "block")
        return clause  # type: ignore[return-value]

    def parse_switch(self) -> ASTNode | None:
        """Parse `switch header { ... }` with `case` / `default` labels in the body."""
        keyword = self.advance()
        header = self._parse_header(keyword)

        prev_in_switch = self.in_switch
        self.in_switch = True
        if self.token.type == tk.LBRACE:
            body = self._parse_switch_block()
        else:
            self.error(self.token, f"Expected `{{` to begin `switch` body before {self.token}")
            if self.token.type in (tk.RBRACE, tk.EOF):
                body = ASTNode.at(self.token, "block")
            else:
                body = self._parse_body(keyword)
        self.in_switch = prev_in_switch

        if header is None:
            return None
        return ASTNode.at(keyword, "switch", None, [header, body])

    def _parse_switch_block(self) -> ASTNode:
        start = self.token
        if not self._enter():
            return ASTNode.at(start, "block")
        try:
            return self.parse_block()
        finally:
            self.depth -= 1

    def parse_case(self) -> ASTNode | None:
        """Parse a `case expr:` or `default:` label."""
        keyword = self.advance()
        if not self.in_switch:
            self.error(keyword, f"`{keyword.value}` label not within a `switch` statement")

        children: list[ASTNode] = []
        if keyword.type == tk.CASE:
            mark = self.errors_reported
            label = self.parse_expression(PREC_ALL)
            if is_missing(label):
                if self.errors_reported == mark:
                    self.error(
                        self.token,
                        f"Expected constant expression following `case` before {self.token}",
                    )
                self.match(tk.COLON)
                return None
            children.append(label)  # type: ignore[arg-type]

        self.match(
            tk.COLON,
            expected=f"Expected colon following `{keyword.value}` label before {self.token}",
        )
        return ASTNode.at(keyword, "case", keyword.type.lower(), children)

    def parse_return(self) -> ASTNode:
        """Parse `return [expr]` or `exit [expr]`."""
        keyword = self.advance()
        children: list[ASTNode] = []
        if (
            self.token.type not in STATEMENT_ENDINGS
            and self.token.type not in tk.KEYWORD_TOKENS
        ):
            value = self.parse_expression(PREC_ALL)
            if not is_missing(value):
                children.append(value)  # type: ignore[arg-type]
        self.match(tk.SEMICOLON)
        return ASTNode.at(keyword, keyword.type.lower(), None, children)

    def parse_jump(self) -> ASTNode:
        """Parse `break` or `continue`."""
        keyword = self.advance()
        self.match(tk.SEMICOLON)
        return ASTNode.at(keyword, keyword.type.lower())

    def parse_declaration(self) -> ASTNode | None:
        """Parse `[local|global] [type...] declarator, ...`."""
        return self._parse_declaration(terminated=True)

    def _parse_declaration(self, terminated: bool) -> ASTNode | None:
        first = self.token
        storage = None
        if self.token.type in (tk.LOCAL, tk.GLOBAL):
            storage = self.advance().type
        type_names: list[str] = []
        while self.token.type == tk.TYPE_NAME:
            type_names.append(self.advance().value)

        mark = self.errors_reported
        declarators = self._parse_expression_list()
        if not declarators:
            if self.errors_reported == mark:
                self.error(self.token, f"Expected declarator before {self.token}")
            if terminated:
                self.match(tk.SEMICOLON)
            return None

        if terminated:
            self.match(tk.SEMICOLON)
        return ASTNode.at(
            first,
            "declaration",
            storage,
            declarators,
            type_=" ".join(type_names) or None,
        )


def parse(
    tokens: TokenStream | list[Token],
    sink: DiagnosticSink,
    dialect: str = STRICT,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> ASTNode:
    """Parse one compilation unit and return its root `block` node."""
    return Parser(tokens, sink, dialect=dialect, max_depth=max_depth).parse()


def parse_source(
    source: str, config: ParserConfig | None = None
) -> tuple[ASTNode, DiagnosticCollector]:
    """Lex and parse EDL source text.

    Returns:
        The root `block` node and the collector holding every diagnostic.
    """
    config = config or ParserConfig()
    sink = DiagnosticCollector()
    lexer = Lexer(CharacterStream(source))
    root = Parser.from_config(lexer, sink, config).parse()
    return root, sink
