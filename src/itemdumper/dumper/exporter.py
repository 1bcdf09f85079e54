"""
Item Exporter

Writes one JSON snapshot per item, named by its numeric id. Output is
deterministic so two cache versions can be compared with a plain diff.

Outputs:
    <output_dir>/<id>.json for every item in the provider
"""

import json
import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from itemdumper.definitions.item import ItemDefinition
from itemdumper.definitions.provider import ItemProvider
from itemdumper.errors import ExportError

logger = logging.getLogger(__name__)


@dataclass
class ExportOptions:
    """Options for export."""
    workers: int = 1                 # >1 writes files on a thread pool
    skip_unchanged: bool = True      # Leave files whose bytes already match
    indent: int = 2


@dataclass
class ExportFailure:
    item_id: int
    path: Path
    error: str

    def __str__(self):
        return f"{self.path.name}: {self.error}"


@dataclass
class ExportReport:
    """Counts from one export run."""
    written: int = 0
    unchanged: int = 0
    failures: List[ExportFailure] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.written + self.unchanged + len(self.failures)

    def __repr__(self):
        return (f"ExportReport({self.written} written, {self.unchanged} unchanged, "
                f"{len(self.failures)} failed)")


def serialize_item(item: ItemDefinition, indent: int = 2) -> bytes:
    """Serialize one definition to the bytes written to its snapshot file."""
    text = json.dumps(item.to_dict(), indent=indent, ensure_ascii=False)
    return (text + "\n").encode("utf-8")


class ItemExporter:
    """Export every item of a provider to individual JSON files."""

    def __init__(self, provider: ItemProvider, options: Optional[ExportOptions] = None):
        self.provider = provider
        self.options = options or ExportOptions()

    def export(self, output_dir: Path) -> ExportReport:
        """
        Write <id>.json for every item.

        Each file is independent: a failure is recorded and the remaining
        files are still written. Any failure raises ExportError at the end.
        """
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        items = list(self.provider.items)
        report = ExportReport()

        if self.options.workers > 1:
            with ThreadPoolExecutor(max_workers=self.options.workers) as pool:
                results = list(pool.map(lambda i: self._write_item(output_dir, i), items))
        else:
            results = [self._write_item(output_dir, item) for item in items]

        for status, failure in results:
            if status == "written":
                report.written += 1
            elif status == "unchanged":
                report.unchanged += 1
            else:
                report.failures.append(failure)

        logger.info(f"Exported {report.total} items to {output_dir} "
                    f"({report.written} written, {report.unchanged} unchanged)")

        if report.failures:
            for failure in report.failures:
                logger.error(f"Export failed for item {failure.item_id}: {failure.error}")
            raise ExportError(report.failures)

        return report

    def _write_item(self, output_dir: Path,
                    item: ItemDefinition) -> Tuple[str, Optional[ExportFailure]]:
        path = output_dir / f"{item.id}.json"
        data = serialize_item(item, self.options.indent)

        try:
            if self.options.skip_unchanged and path.is_file() and path.read_bytes() == data:
                return "unchanged", None
            path.write_bytes(data)
        except OSError as e:
            return "failed", ExportFailure(item.id, path, str(e))

        return "written", None
