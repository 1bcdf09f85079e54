"""
ID Table Generation

Generates Python modules of symbolic item constants:

    item_id.py       class ItemID      - every item not named "null"
    null_item_id.py  class NullItemID  - items named "null" (any case)

Name collisions are NOT deduplicated by default: tables are filled in id
order and the last item to claim a name keeps it. Pass dedupe=True to suffix
repeated names with the item id instead.
"""

import logging
import os
import re
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from itemdumper.definitions.provider import ItemProvider
from itemdumper.errors import TableGenerationError

logger = logging.getLogger(__name__)


ITEM_TABLE = "ItemID"
NULL_ITEM_TABLE = "NullItemID"

_TAG_RE = re.compile(r"<[^>]*>")
_INVALID_RE = re.compile(r"[^A-Z0-9_]")

HEADER = '''"""
Generated by itemdumper. Do not edit.
"""


'''


def sanitize_name(name: str) -> Optional[str]:
    """
    Turn an item name into a constant identifier.

    Returns None if nothing usable is left.
    """
    s = _TAG_RE.sub("", name).upper().replace(" ", "_")
    s = _INVALID_RE.sub("", s)
    if not s:
        return None
    if s[0].isdigit():
        return "_" + s
    return s


def module_name(class_name: str) -> str:
    """ItemID -> item_id, NullItemID -> null_item_id."""
    return re.sub(r"(?<=[a-z])(?=[A-Z])", "_", class_name).lower()


class IDTable:
    """
    One generated constant class, written through a scoped writer.

    Use as a context manager. Entries are collected in memory; on a clean exit
    the module is written to a temp file and moved into place, on an error
    exit the temp file is removed so no truncated module is left behind.
    """

    def __init__(self, directory: Path, class_name: str, dedupe: bool = False):
        self.directory = Path(directory)
        self.class_name = class_name
        self.dedupe = dedupe
        self.path = self.directory / f"{module_name(class_name)}.py"
        self.entries: Dict[str, int] = {}
        self.overwritten = 0
        self.skipped = 0
        self._tmp = None

    @classmethod
    def create(cls, directory: Path, class_name: str, dedupe: bool = False) -> "IDTable":
        return cls(directory, class_name, dedupe)

    def add(self, name: str, item_id: int) -> Optional[str]:
        """Add a constant for item_id. Returns the constant name used, if any."""
        key = sanitize_name(name)
        if key is None:
            self.skipped += 1
            return None

        if key in self.entries and self.entries[key] != item_id:
            if self.dedupe:
                # the suffixed name can itself be taken by an item named e.g. "Rope 9"
                suffix = f"_{item_id}"
                key += suffix
                while key in self.entries and self.entries[key] != item_id:
                    key += suffix
            else:
                # last write wins
                logger.debug(f"{self.class_name}.{key}: {self.entries[key]} replaced by {item_id}")
                self.overwritten += 1
                del self.entries[key]

        self.entries[key] = item_id
        return key

    def render(self) -> str:
        lines = [HEADER, f"class {self.class_name}:\n"]
        if not self.entries:
            lines.append("    pass\n")
        for key, item_id in sorted(self.entries.items(), key=lambda kv: (kv[1], kv[0])):
            lines.append(f"    {key} = {item_id}\n")
        return "".join(lines)

    def __enter__(self) -> "IDTable":
        self.directory.mkdir(parents=True, exist_ok=True)
        self._tmp = tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", newline="\n", dir=self.directory,
            prefix=f".{self.path.stem}.", suffix=".tmp", delete=False,
        )
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        tmp, self._tmp = self._tmp, None
        tmp_path = Path(tmp.name)
        try:
            if exc_type is None:
                tmp.write(self.render())
                tmp.flush()
                os.fsync(tmp.fileno())
            tmp.close()
            if exc_type is None:
                os.replace(tmp_path, self.path)
                logger.debug(f"Wrote {self.path} ({len(self.entries)} constants)")
        finally:
            if not tmp.closed:
                tmp.close()
            if tmp_path.exists():
                tmp_path.unlink()


@dataclass
class TableReport:
    """Summary of one table generation run."""
    item_count: int
    null_count: int
    overwritten: int
    skipped: int
    paths: List[Path]

    def __repr__(self):
        return (f"TableReport({self.item_count} items, {self.null_count} nulls, "
                f"{self.overwritten} overwritten)")


def generate_tables(provider: ItemProvider, output_dir: Path,
                    dedupe: bool = False) -> TableReport:
    """
    Write the ItemID and NullItemID modules for every item of the provider.
    """
    output_dir = Path(output_dir)
    try:
        with IDTable.create(output_dir, ITEM_TABLE, dedupe) as ids, \
                IDTable.create(output_dir, NULL_ITEM_TABLE, dedupe) as nulls:
            for item in provider.items:
                if item.is_null:
                    nulls.add(item.name, item.id)
                else:
                    ids.add(item.name, item.id)
    except OSError as e:
        raise TableGenerationError(f"Failed writing id tables to {output_dir}: {e}") from e

    report = TableReport(
        item_count=len(ids.entries),
        null_count=len(nulls.entries),
        overwritten=ids.overwritten + nulls.overwritten,
        skipped=ids.skipped + nulls.skipped,
        paths=[ids.path, nulls.path],
    )
    logger.info(f"Generated {ITEM_TABLE} ({report.item_count}) and "
                f"{NULL_ITEM_TABLE} ({report.null_count}); "
                f"{report.overwritten} names overwritten")
    return report
