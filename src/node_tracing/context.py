"""Execution context surface consumed from the hosting workflow engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Protocol, runtime_checkable


@dataclass(frozen=True, slots=True)
class WorkflowIdentity:
    id: str
    name: str

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "name": self.name}


@dataclass(frozen=True, slots=True)
class NodeIdentity:
    name: str
    type: str = ""


@runtime_checkable
class ExecutionContext(Protocol):
    """Identity accessors every engine context provides.

    Engines may additionally expose ``get_parent_callback_manager()`` and a
    ``logger`` attribute with ``info``/``debug`` methods; both are probed at
    call time and treated as absent when missing.
    """

    def get_execution_id(self) -> str: ...

    def get_workflow(self) -> WorkflowIdentity: ...

    def get_node(self) -> NodeIdentity: ...


@dataclass(slots=True)
class StaticExecutionContext:
    """Execution context built from plain identity values."""

    execution_id: str
    workflow: WorkflowIdentity
    node: NodeIdentity
    parent_callbacks: Any = None
    logger: Optional[Any] = None

    def get_execution_id(self) -> str:
        return self.execution_id

    def get_workflow(self) -> WorkflowIdentity:
        return self.workflow

    def get_node(self) -> NodeIdentity:
        return self.node

    def get_parent_callback_manager(self) -> Any:
        return self.parent_callbacks
