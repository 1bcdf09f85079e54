"""
Item Definitions

The in-memory record for one cached item, plus the variant kinds an item can
take part in (noted, bought, placeholder) and the resolved links between
definitions once the registry has been linked.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


# Marks an absent template/counterpart id
NO_LINK = -1


class VariantKind(Enum):
    """The three independent variant relationships an item can carry."""

    # (json key, template id attribute, counterpart id attribute)
    NOTED = ("noted", "noted_template", "noted_id")
    BOUGHT = ("bought", "bought_template_id", "bought_id")
    PLACEHOLDER = ("placeholder", "placeholder_template_id", "placeholder_id")

    def __init__(self, key: str, template_attr: str, counterpart_attr: str):
        self.key = key
        self.template_attr = template_attr
        self.counterpart_attr = counterpart_attr


@dataclass
class LinkedVariant:
    """
    Resolved references for one variant kind.

    Both slots point at definitions owned by the registry. They are lookups,
    never copies, so serializers must emit ids rather than follow them.
    """
    template: Optional["ItemDefinition"] = None
    counterpart: Optional["ItemDefinition"] = None

    def to_ids(self) -> Dict[str, Optional[int]]:
        return {
            "template": self.template.id if self.template is not None else None,
            "counterpart": self.counterpart.id if self.counterpart is not None else None,
        }

    def __repr__(self):
        ids = self.to_ids()
        return f"LinkedVariant(template={ids['template']}, counterpart={ids['counterpart']})"


@dataclass(eq=False)
class ItemDefinition:
    """A single decoded item."""
    id: int
    name: str = "null"
    cost: int = 1
    stackable: bool = False
    members: bool = False
    tradeable: bool = False
    weight: int = 0
    options: List[Optional[str]] = field(default_factory=list)

    noted_template: int = NO_LINK
    noted_id: int = NO_LINK
    bought_template_id: int = NO_LINK
    bought_id: int = NO_LINK
    placeholder_template_id: int = NO_LINK
    placeholder_id: int = NO_LINK

    # Filled by the linker
    linked: Dict[VariantKind, LinkedVariant] = field(default_factory=dict, repr=False)

    def variant_ids(self, kind: VariantKind) -> tuple:
        """Return the raw (template id, counterpart id) pair for a kind."""
        return getattr(self, kind.template_attr), getattr(self, kind.counterpart_attr)

    def has_variant(self, kind: VariantKind) -> bool:
        return getattr(self, kind.template_attr) != NO_LINK

    def linked_variant(self, kind: VariantKind) -> LinkedVariant:
        """Get the resolved links for a kind, creating an empty slot pair if needed."""
        lv = self.linked.get(kind)
        if lv is None:
            lv = LinkedVariant()
            self.linked[kind] = lv
        return lv

    def template_of(self, kind: VariantKind) -> Optional["ItemDefinition"]:
        lv = self.linked.get(kind)
        return lv.template if lv else None

    def counterpart_of(self, kind: VariantKind) -> Optional["ItemDefinition"]:
        lv = self.linked.get(kind)
        return lv.counterpart if lv else None

    @property
    def is_null(self) -> bool:
        return self.name.lower() == "null"

    def to_dict(self) -> Dict[str, Any]:
        """
        Serializable view of the definition.

        Key order is fixed so the output is stable between runs. Resolved
        links are emitted as ids only.
        """
        return {
            "id": self.id,
            "name": self.name,
            "cost": self.cost,
            "stackable": self.stackable,
            "members": self.members,
            "tradeable": self.tradeable,
            "weight": self.weight,
            "options": list(self.options),
            "noted_template": self.noted_template,
            "noted_id": self.noted_id,
            "bought_template_id": self.bought_template_id,
            "bought_id": self.bought_id,
            "placeholder_template_id": self.placeholder_template_id,
            "placeholder_id": self.placeholder_id,
            "linked": {
                kind.key: self.linked[kind].to_ids()
                for kind in VariantKind
                if kind in self.linked
            },
        }

    def __repr__(self):
        return f"ItemDefinition({self.id}, {self.name!r})"
