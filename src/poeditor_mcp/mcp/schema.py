"""Schema introspector — capability descriptors derived from input models.

Walks an operation's pydantic input model through public API only
(``model_fields``, ``FieldInfo.annotation``, ``.description``,
``.is_required()``) and produces a JSON-schema-shaped descriptor.

Kind rules:

* ``str`` and ``Enum`` → ``string`` (enums add ``enum``)
* ``bool`` → ``boolean``; ``int``/``float`` → ``number``
* ``list``/``tuple``/``set`` → ``array`` with ``items``
* ``dict`` → ``object`` with ``additionalProperties``
* nested model → ``object`` with ``properties``/``required``
* ``Literal`` → kind of its first value, plus ``enum``
* ``X | None`` is unwrapped; any other union resolves to its first
  declared alternative
* anything else (``Any``, unknown classes) → ``string``
"""

from __future__ import annotations

import types
from enum import Enum
from typing import TYPE_CHECKING, Annotated, Any, Literal, Union, get_args, get_origin

from pydantic import BaseModel

if TYPE_CHECKING:
    from poeditor_mcp.mcp.catalog import Operation

_NONE = type(None)
_ARRAY_ORIGINS = (list, tuple, set, frozenset)


def _strip(annotation: Any) -> Any:
    """Drop ``Annotated`` wrappers and ``None`` from unions; pick the first alternative."""
    while True:
        origin = get_origin(annotation)
        if origin is Annotated:
            annotation = get_args(annotation)[0]
            continue
        if origin is Union or origin is types.UnionType:
            alternatives = [a for a in get_args(annotation) if a is not _NONE]
            annotation = alternatives[0] if alternatives else Any
            continue
        return annotation


def _scalar_kind(value: Any) -> str:
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    return "string"


def describe_type(annotation: Any) -> dict[str, Any]:
    """Descriptor (without description) for one annotation."""
    annotation = _strip(annotation)
    origin = get_origin(annotation)

    if origin is Literal:
        values = list(get_args(annotation))
        return {"type": _scalar_kind(values[0]), "enum": values}

    if origin in _ARRAY_ORIGINS:
        args = [a for a in get_args(annotation) if a is not Ellipsis]
        node: dict[str, Any] = {"type": "array"}
        if args:
            node["items"] = describe_type(args[0])
        return node

    if origin is dict:
        args = get_args(annotation)
        node = {"type": "object"}
        if len(args) == 2:
            node["additionalProperties"] = describe_type(args[1])
        return node

    if isinstance(annotation, type):
        if issubclass(annotation, BaseModel):
            return describe_shape(annotation)
        if issubclass(annotation, Enum):
            return {"type": "string", "enum": [m.value for m in annotation]}
        if issubclass(annotation, bool):
            return {"type": "boolean"}
        if issubclass(annotation, (int, float)):
            return {"type": "number"}
        if issubclass(annotation, (list, tuple, set, frozenset)):
            return {"type": "array"}
        if issubclass(annotation, dict):
            return {"type": "object"}
    return {"type": "string"}


def describe_shape(model: type[BaseModel]) -> dict[str, Any]:
    """Object descriptor for a model: every field, with its required flag."""
    properties: dict[str, Any] = {}
    required: list[str] = []
    for name, info in model.model_fields.items():
        key = info.alias or name
        node = describe_type(info.annotation)
        if info.description:
            node["description"] = info.description
        properties[key] = node
        if info.is_required():
            required.append(key)

    shape: dict[str, Any] = {"type": "object", "properties": properties, "required": required}
    if model.model_config.get("extra") == "forbid":
        shape["additionalProperties"] = False
    return shape


def describe(operation: Operation) -> dict[str, Any]:
    """Capability descriptor advertised in ``tools/list``."""
    return {
        "name": operation.name,
        "description": operation.description,
        "inputSchema": describe_shape(operation.input_model),
    }
