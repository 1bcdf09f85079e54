"""
itemdumper.dumper - Registry, linking and output

Builds the item registry from an archive, links variant relationships, then
writes per-item JSON snapshots and the generated id tables.
"""

from itemdumper.dumper.registry import ItemRegistry
from itemdumper.dumper.linker import (
    LinkConflict,
    LinkReport,
    UnresolvedReference,
    link,
)
from itemdumper.dumper.exporter import (
    ExportFailure,
    ExportOptions,
    ExportReport,
    ItemExporter,
    serialize_item,
)
from itemdumper.dumper.idtables import (
    ITEM_TABLE,
    NULL_ITEM_TABLE,
    IDTable,
    TableReport,
    generate_tables,
    sanitize_name,
)
from itemdumper.dumper.pipeline import DumpOptions, DumpSummary, ItemDumper, dump_items

__all__ = [
    # Registry
    "ItemRegistry",
    # Linker
    "LinkConflict",
    "LinkReport",
    "UnresolvedReference",
    "link",
    # Exporter
    "ExportFailure",
    "ExportOptions",
    "ExportReport",
    "ItemExporter",
    "serialize_item",
    # ID tables
    "ITEM_TABLE",
    "NULL_ITEM_TABLE",
    "IDTable",
    "TableReport",
    "generate_tables",
    "sanitize_name",
    # Pipeline
    "DumpOptions",
    "DumpSummary",
    "ItemDumper",
    "dump_items",
]
