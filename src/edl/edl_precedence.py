"""
Operator precedence table for the EDL expression parser.

Levels are small integers; a larger number binds tighter. The expression parser
folds an operator into the tree only while its level is at least the minimum
level it was called with, so the bound constants below double as "how much of
an expression to read":

    PREC_ALL       read a complete expression, comma operator included
    PREC_ARGUMENT  read one element of a comma-separated list

Right-associative levels (assignment, ternary) recurse on their right-hand side
at their own level; every other level recurses one level tighter.
"""

from edl import edl_constants as tk

PREC_ALL = 0
PREC_COMMA = 1
PREC_ASSIGN = 2
PREC_TERNARY = 3
PREC_LOGICAL_OR = 4
PREC_LOGICAL_XOR = 5
PREC_LOGICAL_AND = 6
PREC_BITWISE_OR = 7
PREC_BITWISE_XOR = 8
PREC_BITWISE_AND = 9
PREC_EQUALITY = 10
PREC_RELATIONAL = 11
PREC_SHIFT = 12
PREC_ADDITIVE = 13
PREC_MULTIPLICATIVE = 14
PREC_MEMBER_POINTER = 15
PREC_UNARY_PREFIX = 16
PREC_POSTFIX = 17
PREC_SCOPE = 18

# Stops before a top-level comma but still admits assignment.
PREC_ARGUMENT = PREC_COMMA + 1

BINARY_PRECEDENCE: dict[str, int] = {
    tk.COMMA: PREC_COMMA,
    tk.ASSIGN: PREC_ASSIGN,
    tk.ASSOP: PREC_ASSIGN,
    tk.OR: PREC_LOGICAL_OR,
    tk.XOR: PREC_LOGICAL_XOR,
    tk.AND: PREC_LOGICAL_AND,
    tk.PIPE: PREC_BITWISE_OR,
    tk.CARET: PREC_BITWISE_XOR,
    tk.AMPERSAND: PREC_BITWISE_AND,
    tk.EQUALS: PREC_EQUALITY,
    tk.NOTEQUAL: PREC_EQUALITY,
    tk.LESS: PREC_RELATIONAL,
    tk.GREATER: PREC_RELATIONAL,
    tk.LESSEQUAL: PREC_RELATIONAL,
    tk.GREATEREQUAL: PREC_RELATIONAL,
    tk.THREEWAY: PREC_RELATIONAL,
    tk.LSH: PREC_SHIFT,
    tk.RSH: PREC_SHIFT,
    tk.PLUS: PREC_ADDITIVE,
    tk.MINUS: PREC_ADDITIVE,
    tk.STAR: PREC_MULTIPLICATIVE,
    tk.SLASH: PREC_MULTIPLICATIVE,
    tk.PERCENT: PREC_MULTIPLICATIVE,
    tk.DIV: PREC_MULTIPLICATIVE,
    tk.MOD: PREC_MULTIPLICATIVE,
    tk.DOT_STAR: PREC_MEMBER_POINTER,
    tk.ARROW_STAR: PREC_MEMBER_POINTER,
    tk.SCOPEACCESS: PREC_SCOPE,
}

RIGHT_ASSOCIATIVE: frozenset[int] = frozenset({PREC_ASSIGN, PREC_TERNARY})

# Tokens that continue an expression as a postfix operator.
POSTFIX_TOKENS: frozenset[str] = frozenset(
    {tk.LPAREN, tk.LBRACK, tk.DOT, tk.ARROW, tk.INCREMENT, tk.DECREMENT}
)


def binary_precedence(token_type: str) -> int | None:
    """Return the level of a binary operator kind, or None if it is not one."""
    return BINARY_PRECEDENCE.get(token_type)


def rhs_precedence(level: int) -> int:
    """Minimum level for the right-hand side of an operator at `level`."""
    return level if level in RIGHT_ASSOCIATIVE else level + 1
