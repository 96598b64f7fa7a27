"""Callback chain entries handed to the hosting engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Tuple, Union

from langchain_core.callbacks import BaseCallbackHandler, BaseCallbackManager


@dataclass(frozen=True, slots=True)
class InheritedCallback:
    """Entry supplied by the parent run (a handler or a callback manager)."""

    value: Any

    @property
    def kind(self) -> str:
        return "inherited"


@dataclass(frozen=True, slots=True)
class TraceHandleCallback:
    """Langfuse handler created for the current execution."""

    handler: BaseCallbackHandler

    @property
    def kind(self) -> str:
        return "langfuse"


CallbackEntry = Union[InheritedCallback, TraceHandleCallback]


def inherited_chain(parent: Any) -> Tuple[InheritedCallback, ...]:
    """Normalize whatever the parent run exposes into ordered entries."""

    if parent is None:
        return ()
    if isinstance(parent, (list, tuple)):
        return tuple(InheritedCallback(item) for item in parent if item is not None)
    return (InheritedCallback(parent),)


def to_langchain_callbacks(
    entries: Iterable[CallbackEntry],
) -> Union[List[Any], BaseCallbackManager]:
    """Render entries in the form accepted by ``RunnableConfig``.

    Without an inherited callback manager this is a plain handler list. When
    the parent run supplied a manager, a copy of it is returned with the
    remaining handlers added as inheritable, so the parent run id, tags and
    metadata still link child runs to the parent execution.
    """

    entries = list(entries)
    manager = next(
        (
            entry.value
            for entry in entries
            if isinstance(entry, InheritedCallback)
            and isinstance(entry.value, BaseCallbackManager)
        ),
        None,
    )
    if manager is None:
        return [_handler(entry) for entry in entries]

    merged = manager.copy()
    for entry in entries:
        if isinstance(entry, InheritedCallback) and entry.value is manager:
            continue
        if isinstance(entry, InheritedCallback) and isinstance(
            entry.value, BaseCallbackManager
        ):
            for handler in entry.value.handlers:
                merged.add_handler(handler, inherit=True)
            continue
        merged.add_handler(_handler(entry), inherit=True)
    return merged


def _handler(entry: CallbackEntry) -> Any:
    if isinstance(entry, TraceHandleCallback):
        return entry.handler
    return entry.value
