"""
Pytest configuration and shared fixtures.
"""

import json
import sys
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from itemdumper.cache import ArchiveRecord, JsonItemDecoder, StaticArchive
from itemdumper.dumper import ItemRegistry


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def record(item_id: int, **fields) -> ArchiveRecord:
    """Build a JSON archive record for one item."""
    return ArchiveRecord(item_id, json.dumps(fields).encode("utf-8"))


def archive_of(items: dict) -> StaticArchive:
    """Build an archive from {id: {field: value}}."""
    return StaticArchive(record(item_id, **fields) for item_id, fields in items.items())


def loaded_registry(items: dict) -> ItemRegistry:
    """Return a registry loaded (not linked) from {id: {field: value}}."""
    registry = ItemRegistry()
    registry.load(archive_of(items), JsonItemDecoder())
    return registry


def write_cache(cache_root: Path, items: dict) -> Path:
    """Write {id: {field: value}} as a directory archive under cache_root."""
    archive_dir = cache_root / "configs" / "item"
    archive_dir.mkdir(parents=True, exist_ok=True)
    for item_id, fields in items.items():
        (archive_dir / f"{item_id}.dat").write_text(json.dumps(fields), encoding="utf-8")
    return archive_dir


# =============================================================================
# DATA FIXTURES
# =============================================================================

@pytest.fixture
def coins_items():
    """Base coins plus a noted form pointing back at it."""
    return {
        1: {"name": "Coins", "stackable": True},
        2: {"name": "Coins(noted)", "noted_template": 1, "noted_id": 2},
    }


@pytest.fixture
def variant_items():
    """A small set exercising all three variant kinds and a null item."""
    return {
        10: {"name": "Bronze sword", "cost": 26, "tradeable": True},
        11: {"name": "Bronze sword", "noted_template": 10, "noted_id": 11},
        12: {"name": "Bronze sword", "placeholder_template_id": 10, "placeholder_id": 12},
        20: {"name": "Holy book", "members": True},
        21: {"name": "Holy book", "bought_template_id": 20, "bought_id": 21},
        30: {"name": "null"},
        31: {"name": "NULL"},
    }


@pytest.fixture
def decoder():
    return JsonItemDecoder()


@pytest.fixture
def coins_registry(coins_items):
    return loaded_registry(coins_items)


@pytest.fixture
def variant_registry(variant_items):
    return loaded_registry(variant_items)
