"""
Item Dump Pipeline

Runs one dump: load -> link -> export + id tables.

Usage:
    dumper = ItemDumper(archive, decoder)
    dumper.load()
    dumper.link()
    dumper.export(out_dir)
    dumper.generate_tables(out_dir)

or simply dump_items(archive, decoder, out_dir).
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from itemdumper.cache.archive import ArchiveSource
from itemdumper.cache.decoder import ItemDecoder
from itemdumper.definitions.item import ItemDefinition
from itemdumper.dumper.exporter import ExportOptions, ExportReport, ItemExporter
from itemdumper.dumper.idtables import TableReport, generate_tables
from itemdumper.dumper.linker import LinkReport, link
from itemdumper.dumper.registry import ItemRegistry

logger = logging.getLogger(__name__)


@dataclass
class DumpOptions:
    """Options for a full dump."""
    strict_links: bool = True
    dedupe_names: bool = False
    export: ExportOptions = field(default_factory=ExportOptions)


@dataclass
class DumpSummary:
    """Everything a dump run reports."""
    item_count: int
    link: LinkReport
    export: ExportReport
    tables: TableReport

    def __repr__(self):
        return f"DumpSummary({self.item_count} items, {self.link}, {self.export}, {self.tables})"


class ItemDumper:
    """
    One dumper run over a single item archive.

    The dumper owns its registry and exposes it read-only through provide()
    and items, so it can be handed to anything expecting an ItemProvider.
    """

    def __init__(self, archive: ArchiveSource, decoder: ItemDecoder,
                 options: Optional[DumpOptions] = None):
        self.archive = archive
        self.decoder = decoder
        self.options = options or DumpOptions()
        self.registry = ItemRegistry()

    def load(self) -> int:
        return self.registry.load(self.archive, self.decoder)

    def link(self) -> LinkReport:
        return link(self.registry, strict=self.options.strict_links)

    def export(self, output_dir: Path) -> ExportReport:
        return ItemExporter(self, self.options.export).export(output_dir)

    def generate_tables(self, output_dir: Path) -> TableReport:
        return generate_tables(self, output_dir, dedupe=self.options.dedupe_names)

    # ItemProvider
    def provide(self, item_id: int) -> Optional[ItemDefinition]:
        return self.registry.get_item(item_id)

    @property
    def items(self) -> List[ItemDefinition]:
        return self.registry.items


def dump_items(archive: ArchiveSource, decoder: ItemDecoder, output_dir: Path,
               options: Optional[DumpOptions] = None) -> DumpSummary:
    """Run a full dump into output_dir."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    logger.info(f"Dumping items to {output_dir}")

    dumper = ItemDumper(archive, decoder, options)
    count = dumper.load()
    link_report = dumper.link()
    export_report = dumper.export(output_dir)
    table_report = dumper.generate_tables(output_dir)

    return DumpSummary(
        item_count=count,
        link=link_report,
        export=export_report,
        tables=table_report,
    )
