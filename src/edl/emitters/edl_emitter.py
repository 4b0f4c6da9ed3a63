"""
Prints EDL AST nodes back as EDL source code.

This module defines the `SourceEmitter` class, which turns a parsed tree into
normalized source text: one statement per line, four-space indentation inside
braces, and spacing fully decided by the tree. It is the "edl" backend of the
`Transpiler`.

Supported Features:
    - Expressions: literals, arrays, groups, prefix/postfix unary, binary, ternary,
      calls, subscripts, member and scope access
    - Statements: blocks, declarations, if/else, for, while/until, do, repeat,
      with, switch/case/default, return/exit, break/continue

Behavior:
    - `paren` nodes print their parentheses, so no other parentheses are added.
    - Expression statements always end with `;`, which keeps statements from
      running together when the output is parsed again.
    - Re-parsing the output of an error-free tree in the same dialect yields a tree
      of the same shape (see `ASTNode.same_shape`).

Raises:
    - `NotImplementedError`: If a node kind has no corresponding emitter.
"""

from edl import edl_constants as tk
from edl.edl_ast import ASTNode


class SourceEmitter:
    """Emits EDL source from AST nodes.

    Attributes:
        lines (list[str]): Accumulated lines of emitted code.
        indent (int): Current indentation level.
    """

    def __init__(self) -> None:
        self.lines: list[str] = []
        self.indent = 0

    def indent_str(self) -> str:
        return "    " * self.indent

    def get_output(self) -> str:
        return "\n".join(self.lines)

    # -- expressions --------------------------------------------------------

    def emit_expr(self, node: ASTNode) -> str:
        """
        Renders an expression node as source text.

        Parameters
        ----------
        node : ASTNode
            The expression node to render.

        Returns
        -------
        str
            The expression as EDL source.

        Raises
        ------
        NotImplementedError
            If no expression emitter exists for the node kind.
        """
        method = getattr(self, f"emit_expr_{node.kind}", None)
        if not callable(method):
            raise NotImplementedError(f"No expression emitter for kind '{node.kind}'")
        # pylint: disable=not-callable
        return str(method(node))

    def emit_expr_literal(self, node: ASTNode) -> str:
        return str(getattr(node.value, "value", node.value))

    def emit_expr_array(self, node: ASTNode) -> str:
        return "[" + self.emit_list(node.children) + "]"

    def emit_expr_paren(self, node: ASTNode) -> str:
        return "(" + self.emit_expr(node.children[0]) + ")"

    def emit_expr_unary(self, node: ASTNode) -> str:
        op = spelling(node.value)
        operand = self.emit_expr(node.children[0])
        if not node.prefix:
            return operand + op
        if node.value in tk.WORD_OPERATORS or (op + operand[:1]) in tk.token_hashmap:
            return f"{op} {operand}"
        return op + operand

    def emit_expr_binary(self, node: ASTNode) -> str:
        lhs = self.emit_expr(node.children[0])
        rhs = self.emit_expr(node.children[1])
        if node.value in (tk.DOT, tk.ARROW, tk.SCOPEACCESS):
            return f"{lhs}{spelling(node.value)}{rhs}"
        if node.value == tk.COMMA:
            return f"{lhs}, {rhs}"
        return f"{lhs} {spelling(node.value)} {rhs}"

    def emit_expr_ternary(self, node: ASTNode) -> str:
        cond, then, otherwise = (self.emit_expr(c) for c in node.children)
        return f"{cond} ? {then} : {otherwise}"

    def emit_expr_call(self, node: ASTNode) -> str:
        return f"{self.emit_expr(node.value)}({self.emit_list(node.children)})"  # type: ignore[arg-type]

    def emit_expr_index(self, node: ASTNode) -> str:
        return f"{self.emit_expr(node.value)}[{self.emit_list(node.children)}]"  # type: ignore[arg-type]

    def emit_list(self, nodes: list[ASTNode]) -> str:
        return ", ".join(self.emit_expr(n) for n in nodes)

    # -- statements ---------------------------------------------------------

    def _visit(self, node: ASTNode) -> None:
        meth = getattr(self, f"emit_{node.kind}", None)
        if not meth:
            raise NotImplementedError(f"SourceEmitter: no emitter for {node.kind}")
        # pylint: disable=not-callable
        meth(node)

    def _emit_clause(self, head: str, body: ASTNode) -> None:
        """Emits `head` followed by a statement body, on the same line if it is a block."""
        if body.kind == "block":
            if not body.children:
                self.lines.append(f"{self.indent_str()}{head} {{}}")
                return
            self.lines.append(f"{self.indent_str()}{head} {{")
            self._emit_indented(body.children)
            self.lines.append(f"{self.indent_str()}}}")
            return
        self.lines.append(f"{self.indent_str()}{head}")
        self._emit_indented([body])

    def _emit_indented(self, statements: list[ASTNode]) -> None:
        self.indent += 1
        for stmt in statements:
            self._visit(stmt)
        self.indent -= 1

    def emit_expression_statement(self, node: ASTNode) -> None:
        self.lines.append(f"{self.indent_str()}{self.emit_expr(node)};")

    emit_literal = emit_expression_statement
    emit_array = emit_expression_statement
    emit_paren = emit_expression_statement
    emit_unary = emit_expression_statement
    emit_binary = emit_expression_statement
    emit_ternary = emit_expression_statement
    emit_call = emit_expression_statement
    emit_index = emit_expression_statement

    def emit_block(self, node: ASTNode) -> None:
        if not node.children:
            self.lines.append(f"{self.indent_str()}{{}}")
            return
        self.lines.append(f"{self.indent_str()}{{")
        self._emit_indented(node.children)
        self.lines.append(f"{self.indent_str()}}}")

    def declaration_text(self, node: ASTNode) -> str:
        words = []
        if node.value is not None:
            words.append(str(node.value).lower())
        if node.type:
            words.append(node.type)
        words.append(self.emit_list(node.children))
        return " ".join(words)

    def emit_declaration(self, node: ASTNode) -> None:
        self.lines.append(f"{self.indent_str()}{self.declaration_text(node)};")

    def emit_if(self, node: ASTNode) -> None:
        """
        Emits an `if` statement and its optional `else` branch.

        Parameters
        ----------
        node : ASTNode
            An `if` node with [condition, body] children and the else branch in
            `else_children`.
        """
        cond, body = node.children
        self._emit_clause(f"if {self.emit_expr(cond)}", body)
        for branch in node.else_children:
            self._emit_clause("else", branch)

    def emit_for(self, node: ASTNode) -> None:
        init, cond, step, body = node.children
        clauses = [self._for_clause_text(c) for c in (init, cond, step)]
        self._emit_clause(f"for ({clauses[0]}; {clauses[1]}; {clauses[2]})", body)

    def _for_clause_text(self, clause: ASTNode) -> str:
        if clause.kind == "block":
            return ""
        if clause.kind == "declaration":
            return self.declaration_text(clause)
        return self.emit_expr(clause)

    def emit_while(self, node: ASTNode) -> None:
        cond, body = node.children
        self._emit_clause(f"{node.value} {self.emit_expr(cond)}", body)

    def emit_do(self, node: ASTNode) -> None:
        body, cond = node.children
        self._emit_clause("do", body)
        self.lines.append(f"{self.indent_str()}{node.value} {self.emit_expr(cond)};")

    def emit_repeat(self, node: ASTNode) -> None:
        count, body = node.children
        self._emit_clause(f"repeat {self.emit_expr(count)}", body)

    def emit_with(self, node: ASTNode) -> None:
        target, body = node.children
        self._emit_clause(f"with {self.emit_expr(target)}", body)

    def emit_switch(self, node: ASTNode) -> None:
        header, body = node.children
        self._emit_clause(f"switch {self.emit_expr(header)}", body)

    def emit_case(self, node: ASTNode) -> None:
        if node.value == "default":
            self.lines.append(f"{self.indent_str()}default:")
        else:
            self.lines.append(f"{self.indent_str()}case {self.emit_expr(node.children[0])}:")

    def emit_return(self, node: ASTNode) -> None:
        keyword = node.kind
        if node.children:
            self.lines.append(f"{self.indent_str()}{keyword} {self.emit_expr(node.children[0])};")
        else:
            self.lines.append(f"{self.indent_str()}{keyword};")

    emit_exit = emit_return

    def emit_break(self, node: ASTNode) -> None:
        self.lines.append(f"{self.indent_str()}{node.kind};")

    emit_continue = emit_break


def spelling(op: object) -> str:
    """Source spelling of an operator tag; compound assignments are stored spelled."""
    return tk.TOKEN_SPELLINGS.get(str(op), str(op))
