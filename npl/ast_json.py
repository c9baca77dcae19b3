"""JSON serialization/deserialization for the NPL AST.

This module converts between AST dataclasses and plain Python dict/list
structures suitable for JSON encoding. Every node becomes a dict tagged
with its class name under "type"; the remaining keys are the node's
fields.
"""

from __future__ import annotations

from dataclasses import fields
from typing import Any, Dict, Type

from . import ast as npl_ast
from .ast import Node

NODE_TYPES: Dict[str, Type[Node]] = {
    cls.__name__: cls
    for cls in vars(npl_ast).values()
    if isinstance(cls, type) and issubclass(cls, Node) and cls is not Node
}


def ast_to_obj(node: Any) -> Any:
    # Primitives
    if node is None or isinstance(node, (int, float, str, bool)):
        return node
    if isinstance(node, list):
        return [ast_to_obj(n) for n in node]
    if isinstance(node, Node):
        obj: Dict[str, Any] = {"type": type(node).__name__}
        for f in fields(node):
            obj[f.name] = ast_to_obj(getattr(node, f.name))
        return obj
    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def ast_from_obj(obj: Any) -> Any:
    if obj is None or isinstance(obj, (int, float, str, bool)):
        return obj
    if isinstance(obj, list):
        return [ast_from_obj(o) for o in obj]
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    t = obj.get("type")
    cls = NODE_TYPES.get(t)
    if cls is None:
        raise ValueError(f"Unknown AST node type: {t}")
    kwargs = {f.name: ast_from_obj(obj.get(f.name)) for f in fields(cls) if f.name in obj}
    return cls(**kwargs)
