"""
itemdumper.definitions - Item definition model

The decoded item record, its variant kinds, and the read-only provider
interface used by everything downstream of the linker.
"""

from itemdumper.definitions.item import (
    NO_LINK,
    ItemDefinition,
    LinkedVariant,
    VariantKind,
)
from itemdumper.definitions.provider import ItemProvider

__all__ = [
    "NO_LINK",
    "ItemDefinition",
    "LinkedVariant",
    "VariantKind",
    "ItemProvider",
]
