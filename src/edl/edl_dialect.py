"""
Condition-header policies for `if`, `while`, `until`, `repeat`, `with` and `switch`.

The three grammar variants accepted by the parser disagree on where a
parenthesized condition header ends. A policy is picked once per parser and
decides that question every time a condition-bearing construct is read.

Classes and Features:
    - HeaderPolicy (Protocol): `read_header(parser, keyword)` returns the header node.
    - StrictHeaderPolicy: the first parenthesized group is the whole header.
    - QuirksHeaderPolicy: binary operators after the group extend the header,
      except `*`, which starts the body. `*` and `&` both draw a warning.
    - UniformHeaderPolicy: the header is one complete expression (GML); the
      dialect has no unary `*`/`&`, so nothing is ambiguous.

A header that does not begin with `(` is read as one complete expression under
every policy.

Example:
    >>> policy = get_header_policy("quirks")
    >>> header = policy.read_header(parser, if_token)

Raises:
    ValueError: If an unknown dialect name is requested.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from edl import edl_constants as tk
from edl.edl_ast import ASTNode
from edl.edl_lexer import Token
from edl.edl_precedence import PREC_ALL, PREC_ARGUMENT, binary_precedence

if TYPE_CHECKING:  # pragma: no cover
    from edl.edl_parser import Parser

logger = logging.getLogger(__name__)

STRICT = "strict"
QUIRKS = "quirks"
GML = "gml"
DIALECTS = (STRICT, QUIRKS, GML)


class HeaderPolicy(Protocol):  # pragma: no cover
    """Protocol for condition-header resolution.

    Attributes:
        name (str): Dialect name the policy implements.
        unary_pointer_ops (bool): Whether `*`, `&`, prefix `++` and `--` exist as
            unary operators in this dialect.
    """

    name: str
    unary_pointer_ops: bool

    def read_header(self, parser: Parser, keyword: Token) -> ASTNode | None: ...  # pragma: no cover


class StrictHeaderPolicy:
    """Only the first parenthesized group after the keyword is the header."""

    name = STRICT
    unary_pointer_ops = True

    def read_header(self, parser: Parser, keyword: Token) -> ASTNode | None:
        if parser.token.type != tk.LPAREN:
            return parser.parse_expression(PREC_ALL)
        return parser.try_parse_operand()


class QuirksHeaderPolicy:
    """Extends the first parenthesized group through following binary operators.

    The decision is made on the single token after the group. `*` is taken as the
    start of the body (`if (p) *q = 1;`) and `&` as bitwise AND
    (`if (a) & (b)`); both cases are reported as warnings so the author can add
    parentheses.
    """

    name = QUIRKS
    unary_pointer_ops = True

    def read_header(self, parser: Parser, keyword: Token) -> ASTNode | None:
        if parser.token.type != tk.LPAREN:
            return parser.parse_expression(PREC_ALL)

        group = parser.try_parse_operand()
        if group is None:
            return None

        follow = parser.token
        if follow.type == tk.STAR:
            parser.warning(
                follow,
                f"`*` after the `{keyword.value}` condition starts the statement body; "
                "parenthesize the whole condition if multiplication was intended",
            )
            return group

        if follow.type == tk.AMPERSAND:
            parser.warning(
                follow,
                f"`&` after the `{keyword.value}` condition is read as bitwise AND; "
                "parenthesize the condition if the body was meant to start with `&`",
            )
        elif follow.type == tk.COMMA or binary_precedence(follow.type) is None:
            return group

        logger.debug(
            "extending `%s` header through %s at %d:%d",
            keyword.value,
            follow.type,
            follow.line,
            follow.col,
        )
        return parser.fold_operators(group, PREC_ARGUMENT)


class UniformHeaderPolicy:
    """The header is one complete expression, as in GML."""

    name = GML
    unary_pointer_ops = False

    def read_header(self, parser: Parser, keyword: Token) -> ASTNode | None:
        return parser.parse_expression(PREC_ALL)


HEADER_POLICIES: dict[str, type[HeaderPolicy]] = {
    STRICT: StrictHeaderPolicy,
    QUIRKS: QuirksHeaderPolicy,
    GML: UniformHeaderPolicy,
}


def get_header_policy(dialect: str) -> HeaderPolicy:
    """Returns the policy for a dialect name ("strict", "quirks" or "gml").

    Raises:
        ValueError: If the dialect is not supported.
    """
    name = dialect.lower()
    if name not in HEADER_POLICIES:
        raise ValueError(f"Unknown dialect: {dialect!r}")
    return HEADER_POLICIES[name]()
