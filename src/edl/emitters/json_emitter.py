"""
Dumps EDL AST nodes as JSON.

`JsonEmitter` is the "json" backend of the `Transpiler`. It serializes every
top-level statement with `ASTNode.to_dict()`, so the output carries node kinds,
operator tags, literal tokens and source positions for tools that consume the
tree outside Python.
"""

import json

from edl.edl_ast import ASTDict, ASTNode


class JsonEmitter:
    """Collects serialized statements and renders them as one JSON array.

    Attributes:
        nodes (list[ASTDict]): Serialized top-level statements in order.
        indent (int): Indentation passed to `json.dumps`.
    """

    def __init__(self, indent: int = 2) -> None:
        self.nodes: list[ASTDict] = []
        self.indent = indent

    def emit_node(self, node: ASTNode) -> None:
        self.nodes.append(node.to_dict())

    def get_output(self) -> str:
        return json.dumps(self.nodes, indent=self.indent)
