"""
Item Registry

Owns every ItemDefinition of one dumper run, keyed by id. The registry is
filled once by load(), mutated in place by the linker, and read-only after
that. Downstream code should only see it through ItemProvider.
"""

import logging
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional

from itemdumper.cache.archive import ArchiveSource
from itemdumper.cache.decoder import ItemDecoder
from itemdumper.definitions.item import ItemDefinition
from itemdumper.errors import DecodeError, LoadError, RegistryStateError

logger = logging.getLogger(__name__)


class ItemRegistry:
    """Mapping of item id -> definition for a single run."""

    def __init__(self):
        self._items: Dict[int, ItemDefinition] = {}
        self._loaded = False
        self._linked = False

    # =========================================================================
    # Load
    # =========================================================================

    def load(self, archive: ArchiveSource, decoder: ItemDecoder) -> int:
        """
        Decode every archive record into the registry.

        The load is all-or-nothing: any decode failure or duplicate id clears
        the registry and raises LoadError.

        Returns:
            Number of definitions loaded
        """
        if self._loaded:
            raise RegistryStateError("Registry is already loaded")

        items: Dict[int, ItemDefinition] = {}
        try:
            for record in archive.records():
                if record.file_id < 0:
                    raise LoadError(f"Negative item id {record.file_id} in archive",
                                    item_id=record.file_id)
                if record.file_id in items:
                    raise LoadError(f"Duplicate item id {record.file_id} in archive",
                                    item_id=record.file_id)

                definition = decoder.decode(record.file_id, record.contents)
                if definition.id != record.file_id:
                    raise DecodeError(record.file_id,
                                      f"decoder returned id {definition.id}")

                items[record.file_id] = definition
                logger.debug(f"Decoded {definition!r}")
        except DecodeError as e:
            self._items = {}
            raise LoadError(f"Load aborted: {e}", item_id=e.item_id) from e
        except LoadError:
            self._items = {}
            raise

        self._items = items
        self._loaded = True
        logger.info(f"Loaded {len(items)} item definitions")
        return len(items)

    def mark_linked(self) -> None:
        """Record that the linker has run. Called by the linker only."""
        self.require_loaded()
        if self._linked:
            raise RegistryStateError("Registry is already linked")
        self._linked = True

    def require_loaded(self) -> None:
        if not self._loaded:
            raise RegistryStateError("Registry has not been loaded")

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def is_linked(self) -> bool:
        return self._linked

    # =========================================================================
    # Read access (ItemProvider)
    # =========================================================================

    def get_item(self, item_id: int) -> Optional[ItemDefinition]:
        return self._items.get(item_id)

    def provide(self, item_id: int) -> Optional[ItemDefinition]:
        return self.get_item(item_id)

    @property
    def items(self) -> List[ItemDefinition]:
        """All definitions ordered by id (a new list each call)."""
        return [self._items[k] for k in sorted(self._items)]

    def as_mapping(self) -> Mapping[int, ItemDefinition]:
        """Read-only view of the underlying id -> definition mapping."""
        return MappingProxyType(self._items)

    def __contains__(self, item_id: int) -> bool:
        return item_id in self._items

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[ItemDefinition]:
        return iter(self.items)

    def __repr__(self):
        state = "linked" if self._linked else ("loaded" if self._loaded else "empty")
        return f"ItemRegistry({len(self._items)} items, {state})"
