"""
itemdumper.cache - Record sources and decoders

Interfaces to the game cache: archives enumerate raw records, decoders turn
each record into an ItemDefinition.
"""

from itemdumper.cache.archive import (
    ITEM_ARCHIVE_PATH,
    ArchiveRecord,
    ArchiveSource,
    DirectoryArchive,
    StaticArchive,
)
from itemdumper.cache.decoder import ItemDecoder, JsonItemDecoder

__all__ = [
    "ITEM_ARCHIVE_PATH",
    "ArchiveRecord",
    "ArchiveSource",
    "DirectoryArchive",
    "StaticArchive",
    "ItemDecoder",
    "JsonItemDecoder",
]
