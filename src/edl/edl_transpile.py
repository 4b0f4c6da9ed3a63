"""
Output targets for parsed EDL programs.

The parser produces a list of top-level statements; a `Transpiler` hands each
one to the emitter registered for the requested target and returns the text
that emitter accumulated.

Targets:
    - "edl": `SourceEmitter`, normalized EDL source.
    - "json": `JsonEmitter`, the tree as a JSON array of node objects.

An emitter provides `emit_<kind>` for the node kinds it understands. Emitters
that treat every kind alike provide a single `emit_node` instead.

Example:
    >>> root, diagnostics = parse_source("x = 1")
    >>> Transpiler("edl").transpile(root.children)
    'x = 1;'
"""

from typing import Callable, Protocol

from edl.edl_ast import ASTNode
from edl.emitters.edl_emitter import SourceEmitter
from edl.emitters.json_emitter import JsonEmitter


class Emitter(Protocol):  # pragma: no cover
    """What `Transpiler` needs from an output target besides its `emit_*` methods."""

    def __init__(self) -> None: ...  # pragma: no cover

    def get_output(self) -> str: ...  # pragma: no cover


EmitterType = type[Emitter]

EMITTERS: dict[str, EmitterType] = {
    "edl": SourceEmitter,
    "json": JsonEmitter,
}


class Transpiler:
    """Feeds top-level statements to the emitter chosen by target name.

    Attributes:
        target (str): Lower-cased target name, a key of `EMITTERS`.
        emitter (Emitter): A fresh emitter for that target.
    """

    def __init__(self, target: str) -> None:
        """
        Raises:
            ValueError: If `target` (compared case-insensitively) is not in `EMITTERS`.
        """
        self.target = target.lower()
        emitter_cls = EMITTERS.get(self.target)
        if emitter_cls is None:
            raise ValueError(
                f"Unknown transpilation target: {target!r} "
                f"(expected one of {', '.join(sorted(EMITTERS))})"
            )
        self.emitter: Emitter = emitter_cls()

    def transpile(self, ast: list[ASTNode]) -> str:
        """Emits every statement in order and returns the emitter's output.

        Raises:
            TypeError: If `ast` holds anything other than `ASTNode` instances.
            NotImplementedError: If the emitter has no method for a node kind.
        """
        strays = [item for item in ast if not isinstance(item, ASTNode)]
        if strays:
            raise TypeError(
                f"All items in AST must be ASTNode instances, got {type(strays[0]).__name__}."
            )
        for node in ast:
            self.method_for(node)(node)
        return self.emitter.get_output()

    def method_for(self, node: ASTNode) -> Callable[[ASTNode], None]:
        method = getattr(self.emitter, f"emit_{node.kind}", None) or getattr(
            self.emitter, "emit_node", None
        )
        if method is None:
            raise NotImplementedError(
                f"{type(self.emitter).__name__} has no emitter method for node kind "
                f"'{node.kind}' (line {node.line}, col {node.col})"
            )
        return method  # type: ignore[no-any-return]
