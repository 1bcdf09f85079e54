"""
Variant Linker

Resolves the noted, bought and placeholder relationships of a fully loaded
registry into references between definitions.

For an item X declaring (template T, counterpart C) for some kind:
1. X records LinkedVariant(template=T, counterpart=C)
2. T gains a reference to C as its counterpart
3. C gains a reference to T as its template

All declared links are applied before any back-reference, so an item's own
declaration always wins over a back-reference written on its behalf. Every
slot is written at most once; a competing value is reported as a conflict.
Resolved references are never followed, so cycles cannot recurse.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from itemdumper.definitions.item import NO_LINK, ItemDefinition, VariantKind
from itemdumper.dumper.registry import ItemRegistry
from itemdumper.errors import UnresolvedReferenceError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UnresolvedReference:
    """A template or counterpart id that is not in the registry."""
    item_id: int
    kind: VariantKind
    field_name: str
    missing_id: int

    def __str__(self):
        return f"item {self.item_id} {self.field_name}={self.missing_id}"


@dataclass(frozen=True)
class LinkConflict:
    """A link slot that two declarations tried to fill with different items."""
    item_id: int
    kind: VariantKind
    slot: str
    kept_id: int
    rejected_id: int

    def __str__(self):
        return (f"item {self.item_id} {self.kind.key}.{self.slot}: "
                f"kept {self.kept_id}, rejected {self.rejected_id}")


@dataclass
class LinkReport:
    """Outcome of one link pass."""
    linked: Counter = field(default_factory=Counter)  # VariantKind -> count
    unresolved: List[UnresolvedReference] = field(default_factory=list)
    conflicts: List[LinkConflict] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.unresolved

    @property
    def total_linked(self) -> int:
        return sum(self.linked.values())

    def __repr__(self):
        return (f"LinkReport({self.total_linked} linked, {len(self.unresolved)} unresolved, "
                f"{len(self.conflicts)} conflicts)")


def _resolve(registry: ItemRegistry, item: ItemDefinition, kind: VariantKind,
             report: LinkReport) -> Optional[Tuple[ItemDefinition, ItemDefinition]]:
    """Look up both ends of one declared link, recording anything missing."""
    template_id, counterpart_id = item.variant_ids(kind)
    template = registry.get_item(template_id)
    counterpart = registry.get_item(counterpart_id) if counterpart_id != NO_LINK else None

    missing = False
    if template is None:
        report.unresolved.append(
            UnresolvedReference(item.id, kind, kind.template_attr, template_id))
        missing = True
    if counterpart is None:
        report.unresolved.append(
            UnresolvedReference(item.id, kind, kind.counterpart_attr, counterpart_id))
        missing = True

    return None if missing else (template, counterpart)


def _assign(owner: ItemDefinition, kind: VariantKind, slot: str,
            target: ItemDefinition, report: LinkReport) -> None:
    """Fill one slot if it is empty; report a conflict if it holds something else."""
    current = owner.template_of(kind) if slot == "template" else owner.counterpart_of(kind)
    if current is target:
        return
    if current is not None:
        conflict = LinkConflict(owner.id, kind, slot, current.id, target.id)
        report.conflicts.append(conflict)
        logger.debug(f"Link conflict: {conflict}")
        return
    setattr(owner.linked_variant(kind), slot, target)


def link(registry: ItemRegistry, strict: bool = True) -> LinkReport:
    """
    Link every variant relationship in a loaded registry.

    Args:
        registry: A registry whose load() has completed
        strict: Raise UnresolvedReferenceError if any referenced id is absent

    Returns:
        LinkReport with per-kind counts, unresolved references and conflicts
    """
    registry.mark_linked()
    report = LinkReport()
    resolved: List[Tuple[ItemDefinition, VariantKind, ItemDefinition, ItemDefinition]] = []

    for item in registry.items:
        for kind in VariantKind:
            if not item.has_variant(kind):
                continue
            ends = _resolve(registry, item, kind, report)
            if ends is None:
                continue
            template, counterpart = ends
            _assign(item, kind, "template", template, report)
            _assign(item, kind, "counterpart", counterpart, report)
            resolved.append((item, kind, template, counterpart))

    for item, kind, template, counterpart in resolved:
        if template is not item:
            _assign(template, kind, "counterpart", counterpart, report)
        if counterpart is not item:
            _assign(counterpart, kind, "template", template, report)
        report.linked[kind] += 1

    summary = ", ".join(f"{k.key}={report.linked[k]}" for k in VariantKind)
    logger.info(f"Linked variants ({summary}); {len(report.conflicts)} conflicts")

    if report.unresolved:
        if strict:
            raise UnresolvedReferenceError(report.unresolved)
        for ref in report.unresolved:
            logger.warning(f"Unresolved {ref.kind.key} reference: {ref}")

    return report
