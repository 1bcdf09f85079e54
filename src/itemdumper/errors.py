"""
Exception types shared across the dumper.

Every failure the pipeline can surface derives from DumperError so the CLI
can report it without catching unrelated exceptions.
"""

from typing import List, Optional


class DumperError(Exception):
    """Base for internal errors."""


class ConfigError(DumperError):
    """Invalid command line arguments or settings file."""


class DecodeError(DumperError):
    """A single archive record could not be decoded."""
    def __init__(self, item_id: int, detail: str):
        super().__init__(f"Failed decoding item {item_id}: {detail}")
        self.item_id = item_id
        self.detail = detail


class LoadError(DumperError):
    """Registry load was aborted. No partial registry survives."""
    def __init__(self, message: str, item_id: Optional[int] = None):
        super().__init__(message)
        self.item_id = item_id


class RegistryStateError(DumperError):
    """A registry operation was called out of order."""


class UnresolvedReferenceError(DumperError):
    """Linking found template or counterpart ids missing from the registry."""
    def __init__(self, unresolved: List):
        self.unresolved = list(unresolved)
        shown = ", ".join(str(u) for u in self.unresolved[:5])
        more = len(self.unresolved) - 5
        if more > 0:
            shown += f" (+{more} more)"
        super().__init__(f"{len(self.unresolved)} unresolved item reference(s): {shown}")


class ExportError(DumperError):
    """One or more item snapshots could not be written."""
    def __init__(self, failures: List):
        self.failures = list(failures)
        first = self.failures[0] if self.failures else None
        detail = f"; first: {first}" if first else ""
        super().__init__(f"Failed writing {len(self.failures)} item file(s){detail}")


class TableGenerationError(DumperError):
    """A generated id table could not be written."""
