"""
Defines the abstract syntax tree (AST) node structure for the EDL scripting language.

Classes:
    ASTNode:
        One node of the syntax tree. A single class tagged by `kind` covers every
        construct; consumers dispatch on `kind` (see `Transpiler`) rather than on
        subclasses, because the set of kinds is closed.

    ASTDict:
        TypedDict representation for serializing ASTNode instances to plain Python
        dictionaries, suitable for JSON output or debugging.

Node kinds and the meaning of `value` / `children`:

    block        statements in order (possibly none)
    literal      value is the Token, verbatim
    array        elements
    paren        [expr]; keeps explicit grouping for later passes
    unary        value is the operator kind, [operand]; `prefix` says which side
    binary       value is the operator kind, [lhs, rhs]
    ternary      [cond, then, else]
    call         value is the callee node, children are the arguments
    index        value is the subscripted node, children are the subscripts
    declaration  value is the storage kind (LOCAL/GLOBAL) or None,
                 `type` is the type name or None, children are the declarators
    if           [cond, body], else branch in else_children
    for          [init, cond, step, body]; absent clauses are empty blocks
    while        value "while" or "until", [cond, body]
    do           value "while" or "until", [body, cond]
    repeat       [count, body]
    switch       [header, block]
    case         value "case" with [label], or "default" with no children
    with         [target, body]
    return/exit  [expr] or no children
    break/continue  no children

"Nothing parsed here" is expressed by the parser returning None, never by a node.

Example:
    node = ASTNode("binary", "PLUS", [lhs, rhs], line=1, col=3)
"""

from typing import Any, TypedDict, Union

from edl.edl_lexer import Token


class ASTDict(TypedDict, total=False):
    """
    TypedDict representation of an ASTNode used for serialization.

    Fields:
        kind (str): The type of AST node (e.g., "if", "binary", "literal").
        value (Any): A string, a nested ASTDict, or a token dict for literals.
        line (int): Line number in the source code where the node originates.
        col (int): Column number in the source code where the node originates.
        type (Optional[str]): Type name of a declaration.
        prefix (Optional[bool]): Whether a unary operator is written before its operand.
        children (List[ASTDict]): Primary child nodes in the AST hierarchy.
        else_children (List[ASTDict]): The `else` branch of an `if`.
    """

    kind: str
    value: Any
    line: int
    col: int
    type: str | None
    prefix: bool | None
    children: list["ASTDict"]
    else_children: list["ASTDict"]


class ASTNode:
    """
    Represents a node in the abstract syntax tree (AST) for EDL.

    Nodes own their children exclusively and are built bottom-up: the parser
    hands a finished node to its caller and nothing modifies it afterwards.

    Args:
        kind (str): The node kind (see module docstring).
        value (Union[str, Token, ASTNode], optional): Operator kind, literal token,
            callee/subscripted node, or construct variant.
        children (list[ASTNode], optional): Primary child nodes.
        line (int): Source line number (default is 0).
        col (int): Source column number (default is 0).
        type_ (str, optional): Type name for declarations.
        prefix (bool, optional): For unary nodes, True when the operator precedes
            the operand.
        else_children (list[ASTNode], optional): The `else` branch of an `if`.
    """

    def __init__(
        self,
        kind: str,
        value: Union[str, Token, "ASTNode"] | None = None,
        children: list["ASTNode"] | None = None,
        line: int = 0,
        col: int = 0,
        type_: str | None = None,
        prefix: bool | None = None,
        else_children: list["ASTNode"] | None = None,
    ):
        self.kind = kind
        self.value = value
        self.children: list["ASTNode"] = children or []
        self.line = line
        self.col = col
        self.type = type_
        self.prefix = prefix
        self.else_children: list["ASTNode"] = else_children or []

    @classmethod
    def at(
        cls,
        tok: Token,
        kind: str,
        value: Union[str, Token, "ASTNode"] | None = None,
        children: list["ASTNode"] | None = None,
        **kwargs: Any,
    ) -> "ASTNode":
        """Builds a node positioned at `tok`."""
        return cls(kind, value, children, line=tok.line, col=tok.col, **kwargs)

    def __repr__(self) -> str:
        parts = [f"{self.kind}"]
        if self.value is not None:
            parts.append(f"value={repr(self.value)}")
        if self.type is not None:
            parts.append(f"type_={self.type}")
        if self.prefix is not None:
            parts.append(f"prefix={self.prefix}")
        if self.children:
            preview = ", ".join(repr(c) for c in self.children[:3])
            if len(self.children) > 3:
                preview += ", ..."
            parts.append(f"children=[{preview}]")
        if self.else_children:
            preview = ", ".join(repr(c) for c in self.else_children[:3])
            if len(self.else_children) > 3:
                preview += ", ..."
            parts.append(f"else_children=[{preview}]")
        return f"ASTNode({', '.join(parts)})"

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, ASTNode):
            return False
        return (
            self.kind == other.kind
            and self.value == other.value
            and self.line == other.line
            and self.col == other.col
            and self.type == other.type
            and self.prefix == other.prefix
            and self.children == other.children
            and self.else_children == other.else_children
        )

    def same_shape(self, other: Any) -> bool:
        """Structural equality that ignores source positions.

        Literal tokens compare by kind and text only, so a tree re-parsed from
        reformatted source matches the original.
        """
        if not isinstance(other, ASTNode):
            return False
        if (
            self.kind != other.kind
            or self.type != other.type
            or self.prefix != other.prefix
            or len(self.children) != len(other.children)
            or len(self.else_children) != len(other.else_children)
        ):
            return False

        mine, theirs = self.value, other.value
        if isinstance(mine, ASTNode):
            if not mine.same_shape(theirs):
                return False
        elif isinstance(mine, Token):
            if not (
                isinstance(theirs, Token)
                and mine.type == theirs.type
                and mine.value == theirs.value
            ):
                return False
        elif mine != theirs:
            return False

        return all(
            a.same_shape(b) for a, b in zip(self.children, other.children)
        ) and all(a.same_shape(b) for a, b in zip(self.else_children, other.else_children))

    def to_dict(self) -> ASTDict:
        val: Any = self.value
        if isinstance(val, ASTNode):
            val = val.to_dict()
        elif isinstance(val, Token):
            val = {"type": val.type, "value": val.value, "line": val.line, "col": val.col}

        return {
            "kind": self.kind,
            "value": val,
            "line": self.line,
            "col": self.col,
            "type": self.type,
            "prefix": self.prefix,
            "children": [c.to_dict() for c in self.children],
            "else_children": [c.to_dict() for c in self.else_children],
        }
