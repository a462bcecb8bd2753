"""Operation catalog — the static registry of invocable tools.

Operations are registered once at startup and the catalog is then sealed;
lookups by name are the only access afterwards. Listing order is
registration order.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable, Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

if TYPE_CHECKING:
    from poeditor_mcp.infrastructure.poeditor import PoeditorClient
    from poeditor_mcp.services.result import OperationResult

Handler = Callable[[Any, "PoeditorClient"], Awaitable["OperationResult | dict[str, Any]"]]


@dataclass(frozen=True)
class Operation:
    """A named unit of work with a declared input shape.

    ``input_model`` is both the validator for raw arguments and the source
    of the advertised capability schema.
    """

    name: str
    description: str
    input_model: type[BaseModel]
    handler: Handler


class OperationCatalog:
    def __init__(self, operations: Iterable[Operation] = ()) -> None:
        self._operations: dict[str, Operation] = {}
        self._sealed = False
        for operation in operations:
            self.register(operation)

    def register(self, operation: Operation) -> None:
        if self._sealed:
            msg = f"Catalog is sealed; cannot register {operation.name!r}"
            raise RuntimeError(msg)
        if operation.name in self._operations:
            msg = f"Duplicate operation name: {operation.name!r}"
            raise ValueError(msg)
        self._operations[operation.name] = operation

    def seal(self) -> OperationCatalog:
        self._sealed = True
        return self

    @property
    def sealed(self) -> bool:
        return self._sealed

    def list_operations(self) -> list[Operation]:
        return list(self._operations.values())

    def find(self, name: str) -> Operation | None:
        return self._operations.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._operations

    def __iter__(self) -> Iterator[Operation]:
        return iter(self._operations.values())

    def __len__(self) -> int:
        return len(self._operations)
