from dataclasses import dataclass
from typing import List, Optional, Set, Tuple

from ..errors import TypeNotFoundError
from ..metadata.model import AssemblyDefinition, TypeDefinition
from ..metadata.naming import is_backing_field, is_user_member
from ..metadata.resolver import AssemblyResolver
from ..types import Link, LinkCategory, NodeKind
from ..utils.logger import app_logger
from .directed_graph import DirectedGraph
from .identity import NodeCache, NodeIdentityResolver
from .namespaces import build_namespace_links
from .presentation import Icons
from .scanner import InstructionScanner
from .scope import ScopeFilter


@dataclass
class TypeGraphResult:
    """Outcome of a single-type analysis; a missing type is an error value."""
    graph: Optional[DirectedGraph] = None
    error: Optional[TypeNotFoundError] = None

    @property
    def success(self) -> bool:
        return self.error is None


class GraphBuildPass:
    """State owned by one graph-build pass: identity cache, resolver, scanner and output graph."""

    def __init__(self, resolver: AssemblyResolver, scope_filter: ScopeFilter,
                 icons: Icons, hierarchy_only: bool):
        self.cache = NodeCache()
        self.identity = NodeIdentityResolver(resolver, self.cache, icons)
        self.scanner = InstructionScanner(self.identity, scope_filter, resolver, hierarchy_only)
        self.graph = DirectedGraph()
        self.emitted_namespace_links: Set[Tuple[str, str]] = set()


class GraphCreator:
    """Builds containment and usage graphs from an assembly's metadata.

    DirectedGraph keeps every link it is given; emitting each
    namespace-to-namespace link once per pass is this creator's policy.
    Type, member and usage links keep their multiplicity.
    """

    def __init__(self, resolver: AssemblyResolver, scope_filter: Optional[ScopeFilter] = None,
                 icons: Optional[Icons] = None, hierarchy_only: bool = False):
        self.logger = app_logger.bind(component="graph_creator")
        self.resolver = resolver
        self.scope_filter = scope_filter or ScopeFilter()
        self.icons = icons or Icons()
        self.hierarchy_only = hierarchy_only

    @classmethod
    def from_settings(cls, resolver: AssemblyResolver, settings) -> "GraphCreator":
        return cls(
            resolver,
            scope_filter=ScopeFilter.from_settings(settings),
            icons=Icons(settings.icon_directory),
            hierarchy_only=settings.type_graph_hierarchy_only,
        )

    def analyzable_types(self, assembly: AssemblyDefinition) -> List[TypeDefinition]:
        return [
            t for t in assembly.iter_types()
            if self.scope_filter.is_analyzable(t) and not t.is_nested_private
        ]

    def create_graph(self, assembly: AssemblyDefinition) -> DirectedGraph:
        """Graph of every analyzable type in the assembly."""
        types = self.analyzable_types(assembly)
        self.logger.info(f"Analyzing {len(types)} of {assembly.type_count} types in {assembly.name}")
        return self._run(types, hierarchy_only=False)

    def create_type_graph(self, assembly: AssemblyDefinition, full_type_name: str) -> TypeGraphResult:
        """Graph of a single type; an unknown type name is returned as an error value."""
        type_definition = assembly.find_type(full_type_name)
        if type_definition is None:
            self.logger.warning(f"Type {full_type_name} not found in {assembly.name}")
            return TypeGraphResult(error=TypeNotFoundError(full_type_name, assembly.name))
        return TypeGraphResult(graph=self._run([type_definition], hierarchy_only=self.hierarchy_only))

    def _run(self, types: List[TypeDefinition], hierarchy_only: bool) -> DirectedGraph:
        build_pass = GraphBuildPass(self.resolver, self.scope_filter, self.icons, hierarchy_only)

        # Own members first, so inherited-member labels never stick to a type's own members
        for type_definition in types:
            self._register_members(build_pass, type_definition)

        for type_definition in types:
            self._add_type(build_pass, type_definition)

        self.logger.info(
            f"Graph pass finished: {len(build_pass.graph)} links, {len(build_pass.cache)} cached nodes")
        return build_pass.graph

    def _register_members(self, build_pass: GraphBuildPass, type_definition: TypeDefinition):
        identity = build_pass.identity
        identity.type_node(type_definition.reference())
        for method in type_definition.methods:
            if is_user_member(method.name):
                identity.method_node(method.reference(), type_definition)
        for property_definition in type_definition.properties:
            identity.property_node(property_definition, type_definition)
        for field_definition in type_definition.fields:
            if is_user_member(field_definition.name):
                identity.field_node(field_definition.reference(), type_definition)

    def _add_type(self, build_pass: GraphBuildPass, type_definition: TypeDefinition):
        identity = build_pass.identity
        graph = build_pass.graph
        type_node = identity.type_node(type_definition.reference())

        if type_definition.is_nested:
            declaring_node = identity.type_node(type_definition.declaring_type.reference())
            graph.add(Link(source=declaring_node, target=type_node, category=LinkCategory.CONTAINS))
        else:
            for link in build_namespace_links(type_definition.namespace, type_node, identity):
                if link.target.kind == NodeKind.NAMESPACE:
                    key = (link.source.id, link.target.id)
                    if key in build_pass.emitted_namespace_links:
                        continue
                    build_pass.emitted_namespace_links.add(key)
                graph.add(link)

        for method in type_definition.methods:
            if method.is_getter or method.is_setter or not is_user_member(method.name):
                continue
            member_node = identity.method_node(method.reference(), type_definition)
            graph.add(Link(source=type_node, target=member_node, category=LinkCategory.CONTAINS))

        for property_definition in type_definition.properties:
            member_node = identity.property_node(property_definition, type_definition)
            graph.add(Link(source=type_node, target=member_node, category=LinkCategory.CONTAINS))

        for field_definition in type_definition.fields:
            if is_backing_field(field_definition.name) or not is_user_member(field_definition.name):
                continue
            member_node = identity.field_node(field_definition.reference(), type_definition)
            graph.add(Link(source=type_node, target=member_node, category=LinkCategory.CONTAINS))

        graph.add(*build_pass.scanner.scan_type(type_definition))
