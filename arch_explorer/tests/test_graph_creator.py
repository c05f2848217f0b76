import pytest
from pathlib import Path
import sys

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from arch_explorer.config import Settings
from arch_explorer.errors import TypeNotFoundError
from arch_explorer.graph.graph_creator import GraphCreator
from arch_explorer.graph.scope import ScopeFilter
from arch_explorer.metadata.resolver import AssemblyResolver
from arch_explorer.types import LinkCategory, NodeKind


def pairs(graph, category):
    return [(l.source.id, l.target.id) for l in graph.links if l.category == category]


class TestCreateGraph:
    """Test the whole-assembly graph."""

    def test_namespace_chain_is_emitted_once(self, sample_assembly, resolver):
        graph = GraphCreator(resolver).create_graph(sample_assembly)
        contains = pairs(graph, LinkCategory.CONTAINS)

        assert contains.count(("Shop", "Shop.Orders")) == 1
        assert contains.count(("Shop", "Shop.Core")) == 1
        assert ("Shop.Orders", "Shop.Orders.Order") in contains
        assert ("Shop.Orders", "Shop.Orders.OrderLine") in contains
        assert ("Tools", "Tools.Formatting") in contains
        assert ("Shop", "Shop.Orders.Order") not in contains

    def test_first_links_follow_type_order(self, sample_assembly, resolver):
        graph = GraphCreator(resolver).create_graph(sample_assembly)

        assert [(l.source.id, l.target.id) for l in graph.links[:3]] == [
            ("Shop", "Shop.Core"),
            ("Shop.Core", "Shop.Core.EntityBase"),
            ("Shop.Core.EntityBase", "System.Void Shop.Core.EntityBase::.ctor()"),
        ]

    def test_members_are_contained_by_their_type(self, sample_assembly, resolver):
        graph = GraphCreator(resolver).create_graph(sample_assembly)
        contained = [t for s, t in pairs(graph, LinkCategory.CONTAINS) if s == "Shop.Orders.Order"]

        assert contained == [
            "System.Void Shop.Orders.Order::.ctor()",
            "System.Void Shop.Orders.Order::Submit()",
            "System.Void Shop.Orders.Order::Recalculate()",
            "System.Void Shop.Orders.Order::Recalculate(System.Decimal)",
            "System.Void Shop.Orders.Order::<Submit>g__Log|3_0()",
            "System.Void Shop.Orders.Order::Format(T)",
            "System.Decimal Shop.Orders.Order::Total()",
            "System.Decimal Shop.Orders.Order::total",
            "System.Int32 Shop.Orders.Order::count",
            "Shop.Orders.Order/Status",
        ]

    def test_nested_type_is_contained_by_declaring_type(self, sample_assembly, resolver):
        graph = GraphCreator(resolver).create_graph(sample_assembly)
        contains = pairs(graph, LinkCategory.CONTAINS)

        assert ("Shop.Orders.Order", "Shop.Orders.Order/Status") in contains
        assert not any(t == "Shop.Orders.Order/Status" and s != "Shop.Orders.Order" for s, t in contains)

    def test_no_accessor_or_synthetic_nodes(self, sample_assembly, resolver):
        graph = GraphCreator(resolver).create_graph(sample_assembly)
        ids = [n.id for n in graph.nodes()]

        assert not any("::get_" in i or "::set_" in i for i in ids)
        assert not any("k__BackingField" in i for i in ids)
        assert not any("<>c" in i or "<Module>" in i for i in ids)
        assert not any(i.startswith("Microsoft") for i in ids)

    def test_lambda_and_captured_this_never_become_nodes(self, make_assembly):
        a = "[Shop]App.A"
        assembly = make_assembly({
            "namespace": "App",
            "name": "A",
            "fields": [{"name": "<>4__this", "field_type": a}],
            "methods": [
                {"name": "Run", "body": [
                    {"opcode": "ldftn", "operand": {"kind": "method", "declaring_type": a, "name": "<Run>b__0_0"}},
                    {"opcode": "ldfld", "operand": {"kind": "field", "declaring_type": a, "name": "<>4__this",
                                                    "field_type": a}},
                ]},
                {"name": "<Run>b__0_0", "body": []},
            ],
        })

        graph = GraphCreator(AssemblyResolver(assembly)).create_graph(assembly)
        ids = [n.id for n in graph.nodes()]

        assert ids == ["App", "App.A", "System.Void App.A::Run()"]

    def test_node_ids_are_unique(self, sample_assembly, resolver):
        graph = GraphCreator(resolver).create_graph(sample_assembly)
        ids = [n.id for n in graph.nodes()]

        assert len(ids) == len(set(ids))

    def test_own_members_keep_plain_labels(self, sample_assembly, resolver):
        graph = GraphCreator(resolver).create_graph(sample_assembly)
        labels = {n.id: n.label for n in graph.nodes()}

        assert labels["System.Void Shop.Core.EntityBase::Validate()"] == "Validate"
        assert labels["System.Int32 Shop.Core.EntityBase::Id()"] == "Id"
        assert labels["Shop.Orders.Repository`1"] == "Repository<T>"

    def test_property_nodes(self, sample_assembly, resolver):
        graph = GraphCreator(resolver).create_graph(sample_assembly)
        total = [n for n in graph.nodes() if n.id == "System.Decimal Shop.Orders.Order::Total()"][0]

        assert total.kind == NodeKind.PROPERTY
        assert (total.id, "System.Decimal Shop.Orders.Order::total") in pairs(graph, LinkCategory.READS_FIELD)

    def test_usage_links_from_submit(self, sample_assembly, resolver):
        graph = GraphCreator(resolver).create_graph(sample_assembly)
        submit = "System.Void Shop.Orders.Order::Submit()"
        usage = [l for l in graph.links if l.source.id == submit or
                 (l.category == LinkCategory.REFERENCES_TYPE and l.source.id == "Shop.Orders.Order")]

        assert len(usage) == 14
        assert all(l.category != LinkCategory.CONTAINS for l in usage)

    def test_replay_is_deterministic(self, sample_assembly, resolver):
        first = GraphCreator(resolver).create_graph(sample_assembly)
        second = GraphCreator(resolver).create_graph(sample_assembly)

        assert first.to_dict() == second.to_dict()

    def test_hierarchy_only_does_not_apply(self, sample_assembly, resolver):
        full = GraphCreator(resolver).create_graph(sample_assembly)
        reduced = GraphCreator(resolver, hierarchy_only=True).create_graph(sample_assembly)

        assert full.to_dict() == reduced.to_dict()

    def test_allowlist_is_applied_on_both_ends(self, sample_assembly, resolver):
        graph = GraphCreator(resolver, scope_filter=ScopeFilter(["orders"])).create_graph(sample_assembly)
        ids = [n.id for n in graph.nodes()]

        assert not any("Shop.Core" in i or "Tools." in i for i in ids)
        assert "Shop.Orders.Order" in ids

    def test_from_settings(self, sample_assembly, resolver):
        settings = Settings(export_only_namespace_name_contains=["formatting"], icon_directory="icons")
        graph = GraphCreator.from_settings(resolver, settings).create_graph(sample_assembly)

        assert [n.id for n in graph.nodes()] == [
            "Tools", "Tools.Formatting", "Tools.Formatting.Printer", "System.Void Tools.Formatting.Printer::Print()",
        ]
        assert graph.nodes()[2].style.icon == "icons/class.png"


class TestCreateTypeGraph:
    """Test the single-type graph."""

    def test_inherited_members_get_base_labels(self, sample_assembly, resolver):
        result = GraphCreator(resolver).create_type_graph(sample_assembly, "Shop.Orders.Order")
        labels = {n.id: n.label for n in result.graph.nodes()}

        assert result.success
        assert labels["System.Void Shop.Core.EntityBase::Validate()"] == "base.Validate"
        assert labels["System.Int32 Shop.Core.EntityBase::Id()"] == "base.Id"
        assert labels["System.Void Shop.Orders.Order::Submit()"] == "Submit"

    def test_only_the_requested_type_is_contained(self, sample_assembly, resolver):
        result = GraphCreator(resolver).create_type_graph(sample_assembly, "Shop.Orders.Order")
        contains = pairs(result.graph, LinkCategory.CONTAINS)

        assert contains[:2] == [("Shop", "Shop.Orders"), ("Shop.Orders", "Shop.Orders.Order")]
        assert all(s in ("Shop", "Shop.Orders", "Shop.Orders.Order") for s, _ in contains)

    def test_unknown_type_is_an_error_value(self, sample_assembly, resolver):
        result = GraphCreator(resolver).create_type_graph(sample_assembly, "Shop.Orders.Missing")

        assert not result.success
        assert result.graph is None
        assert isinstance(result.error, TypeNotFoundError)
        assert result.error.full_type_name == "Shop.Orders.Missing"
        assert result.error.assembly_name == "Shop"

    def test_hierarchy_only(self, sample_assembly, resolver):
        result = GraphCreator(resolver, hierarchy_only=True).create_type_graph(sample_assembly, "Shop.Orders.Order")
        targets = [l.target.id for l in result.graph.links if l.category != LinkCategory.CONTAINS]

        assert targets
        assert not any("OrderLine" in t or "Repository" in t or "Printer" in t for t in targets)
        assert "System.Void Shop.Core.EntityBase::Validate()" in targets

    def test_passes_do_not_share_labels(self, sample_assembly, resolver):
        creator = GraphCreator(resolver)
        creator.create_type_graph(sample_assembly, "Shop.Orders.Order")
        graph = creator.create_graph(sample_assembly)
        labels = {n.id: n.label for n in graph.nodes()}

        assert labels["System.Void Shop.Core.EntityBase::Validate()"] == "Validate"

    def test_nested_type_graph(self, sample_assembly, resolver):
        result = GraphCreator(resolver).create_type_graph(sample_assembly, "Shop.Orders.Order/Status")

        assert pairs(result.graph, LinkCategory.CONTAINS) == [("Shop.Orders.Order", "Shop.Orders.Order/Status")]
