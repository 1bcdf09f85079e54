"""
Tests for variant linking.
"""

import pytest

from itemdumper.definitions import VariantKind
from itemdumper.dumper import link
from itemdumper.errors import RegistryStateError, UnresolvedReferenceError

from conftest import loaded_registry


class TestNotedScenario:
    """Coins and its noted form."""

    def test_base_knows_noted_form(self, coins_registry):
        """The template gains a reference to the noted item."""
        link(coins_registry)
        coins = coins_registry.get_item(1)
        noted = coins_registry.get_item(2)
        assert coins.counterpart_of(VariantKind.NOTED) is noted

    def test_noted_knows_template(self, coins_registry):
        """The noted item references its template."""
        link(coins_registry)
        coins = coins_registry.get_item(1)
        noted = coins_registry.get_item(2)
        assert noted.template_of(VariantKind.NOTED) is coins

    def test_references_not_copies(self, coins_registry):
        """Resolved links are the registry's own instances."""
        link(coins_registry)
        linked = coins_registry.get_item(2).template_of(VariantKind.NOTED)
        linked.name = "Renamed"
        assert coins_registry.get_item(1).name == "Renamed"

    def test_report_counts(self, coins_registry):
        report = link(coins_registry)
        assert report.ok
        assert report.linked[VariantKind.NOTED] == 1
        assert report.total_linked == 1
        assert report.conflicts == []

    def test_link_once(self, coins_registry):
        """A registry is linked at most once."""
        link(coins_registry)
        with pytest.raises(RegistryStateError):
            link(coins_registry)


class TestVariantKinds:
    """Each kind resolves independently."""

    def test_all_kinds(self, variant_registry):
        link(variant_registry)
        sword = variant_registry.get_item(10)
        book = variant_registry.get_item(20)

        assert sword.counterpart_of(VariantKind.NOTED).id == 11
        assert sword.counterpart_of(VariantKind.PLACEHOLDER).id == 12
        assert sword.counterpart_of(VariantKind.BOUGHT) is None
        assert book.counterpart_of(VariantKind.BOUGHT).id == 21
        assert variant_registry.get_item(12).template_of(VariantKind.PLACEHOLDER) is sword

    def test_sentinels_untouched(self, variant_registry):
        """Items without any declared or received link get no link slots."""
        link(variant_registry)
        assert variant_registry.get_item(30).linked == {}
        assert variant_registry.get_item(31).linked == {}

    def test_sentinels_never_looked_up(self, variant_registry, monkeypatch):
        """No registry lookup is made for a -1 template or counterpart id."""
        calls = []
        get_item = variant_registry.get_item
        monkeypatch.setattr(variant_registry, "get_item",
                            lambda item_id: calls.append(item_id) or get_item(item_id))
        link(variant_registry)
        assert calls
        assert -1 not in calls

    def test_unlinked_items_make_no_lookups(self, monkeypatch):
        """Items whose template fields are all -1 cause no lookups at all."""
        registry = loaded_registry({1: {"name": "Rope"}, 2: {"name": "null"}})
        calls = []
        get_item = registry.get_item
        monkeypatch.setattr(registry, "get_item",
                            lambda item_id: calls.append(item_id) or get_item(item_id))
        report = link(registry)
        assert calls == []
        assert report.total_linked == 0

    def test_two_sided_pair(self):
        """Base and variant declaring each other link both ways."""
        registry = loaded_registry({
            995: {"name": "Coins", "noted_template": 799, "noted_id": 996},
            996: {"name": "Coins", "noted_template": 799, "noted_id": 995},
            799: {"name": "Bank note"},
        })
        link(registry)
        coins = registry.get_item(995)
        noted = registry.get_item(996)
        template = registry.get_item(799)
        assert coins.counterpart_of(VariantKind.NOTED) is noted
        assert noted.counterpart_of(VariantKind.NOTED) is coins
        assert coins.template_of(VariantKind.NOTED) is template

    def test_shared_template_conflicts(self):
        """A template shared by many variants keeps its first counterpart."""
        registry = loaded_registry({
            1: {"name": "Template"},
            2: {"name": "A", "noted_template": 1, "noted_id": 2},
            3: {"name": "B", "noted_template": 1, "noted_id": 3},
        })
        report = link(registry)
        assert registry.get_item(1).counterpart_of(VariantKind.NOTED).id == 2
        assert len(report.conflicts) == 1
        conflict = report.conflicts[0]
        assert (conflict.item_id, conflict.kept_id, conflict.rejected_id) == (1, 2, 3)

    def test_own_declaration_wins(self):
        """An item's declared template beats a back-reference from another item."""
        registry = loaded_registry({
            1: {"name": "A", "placeholder_template_id": 3, "placeholder_id": 2},
            2: {"name": "B", "placeholder_template_id": 4, "placeholder_id": 2},
            3: {"name": "C"},
            4: {"name": "D"},
        })
        link(registry)
        assert registry.get_item(2).template_of(VariantKind.PLACEHOLDER).id == 4

    def test_self_reference_does_not_recurse(self):
        """An item that is its own template links without looping."""
        registry = loaded_registry({1: {"noted_template": 1, "noted_id": 1}})
        report = link(registry)
        item = registry.get_item(1)
        assert item.template_of(VariantKind.NOTED) is item
        assert item.counterpart_of(VariantKind.NOTED) is item
        assert report.linked[VariantKind.NOTED] == 1


class TestUnresolved:
    """References to ids that are not loaded."""

    def test_missing_template_strict(self):
        """A missing template id raises in strict mode."""
        registry = loaded_registry({2: {"noted_template": 1, "noted_id": 2}})
        with pytest.raises(UnresolvedReferenceError) as exc:
            link(registry)
        refs = exc.value.unresolved
        assert len(refs) == 1
        assert refs[0].item_id == 2
        assert refs[0].field_name == "noted_template"
        assert refs[0].missing_id == 1

    def test_missing_counterpart_lenient(self):
        """Lenient mode reports and leaves the kind unlinked."""
        registry = loaded_registry({
            1: {"name": "Coins"},
            2: {"bought_template_id": 1, "bought_id": 77},
        })
        report = link(registry, strict=False)
        assert not report.ok
        assert report.unresolved[0].missing_id == 77
        assert registry.get_item(2).linked == {}
        assert registry.get_item(1).linked == {}

    def test_template_without_counterpart(self):
        """A template with a sentinel counterpart is unresolved, not half-linked."""
        registry = loaded_registry({1: {}, 2: {"noted_template": 1}})
        report = link(registry, strict=False)
        assert report.unresolved[0].field_name == "noted_id"
        assert registry.get_item(1).linked == {}

    def test_other_links_survive(self):
        """Resolvable links are still applied when another one fails."""
        registry = loaded_registry({
            1: {"name": "Coins"},
            2: {"noted_template": 1, "noted_id": 2, "bought_template_id": 50, "bought_id": 2},
        })
        report = link(registry, strict=False)
        assert registry.get_item(1).counterpart_of(VariantKind.NOTED).id == 2
        assert VariantKind.BOUGHT not in registry.get_item(2).linked
        assert len(report.unresolved) == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
