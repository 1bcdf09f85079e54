"""
Read-only access to a linked registry.

Exporters and table generators are written against ItemProvider so they never
depend on the concrete registry type or see its mutating operations.
"""

from typing import Iterable, Optional, Protocol, runtime_checkable

from itemdumper.definitions.item import ItemDefinition


@runtime_checkable
class ItemProvider(Protocol):
    """Lookup of item definitions by id."""

    def provide(self, item_id: int) -> Optional[ItemDefinition]:
        """Return the definition for item_id, or None if it is not known."""
        ...

    @property
    def items(self) -> Iterable[ItemDefinition]:
        """All definitions, ordered by id."""
        ...
