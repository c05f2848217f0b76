from typing import Callable, Dict, Optional

from ..metadata.model import (
    FieldReference,
    MethodDefinition,
    MethodReference,
    Operand,
    PropertyDefinition,
    TypeDefinition,
    TypeReference,
)
from ..metadata.naming import parse_local_function_name, remove_accessor_prefix
from ..metadata.resolver import AssemblyResolver
from ..types import Node, NodeKind
from .presentation import (
    Icons,
    field_style,
    local_function_style,
    method_style,
    namespace_style,
    property_style,
    type_style,
)

GLOBAL_NAMESPACE_ID = "<global>"
BASE_PREFIX = "base."


class NodeCache:
    """Node identity cache owned by a single graph-build pass."""

    def __init__(self):
        self._nodes: Dict[str, Node] = {}

    def get(self, node_id: str) -> Optional[Node]:
        return self._nodes.get(node_id)

    def get_or_create(self, node_id: str, factory: Callable[[], Node]) -> Node:
        """Return the cached node for ``node_id``; the factory only runs on a miss."""
        node = self._nodes.get(node_id)
        if node is None:
            node = factory()
            self._nodes[node_id] = node
        return node

    def __contains__(self, node_id: str) -> bool:
        return node_id in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)


class NodeIdentityResolver:
    """Maps metadata references to canonical, deduplicated graph nodes.

    Ids are fully-qualified names with generic instantiations normalized to
    their unbound definitions. The first resolution of an id decides its label
    and style; later resolutions return the cached node untouched.
    """

    def __init__(self, resolver: AssemblyResolver, cache: NodeCache, icons: Optional[Icons] = None):
        self.resolver = resolver
        self.cache = cache
        self.icons = icons or Icons()

    def node_for(self, reference: Operand, current_type: Optional[TypeDefinition] = None) -> Node:
        if reference.kind == "method":
            return self.method_node(reference, current_type)
        if reference.kind == "field":
            return self.field_node(reference, current_type)
        if reference.kind == "type":
            return self.type_node(reference)
        raise ValueError(f"Unsupported reference kind: {reference.kind}")

    def namespace_node(self, namespace: str) -> Node:
        node_id = namespace or GLOBAL_NAMESPACE_ID
        return self.cache.get_or_create(node_id, lambda: Node(
            id=node_id,
            label=node_id.rpartition(".")[2],
            kind=NodeKind.NAMESPACE,
            style=namespace_style(self.icons),
        ))

    def type_node(self, reference: TypeReference) -> Node:
        element = reference.element_type
        node_id = element.full_name

        def create() -> Node:
            definition = self.resolver.resolve_type(element)
            label = definition.display_name if definition is not None else element.display_name
            is_interface = definition is not None and definition.is_interface
            return Node(id=node_id, label=label, kind=NodeKind.TYPE, style=type_style(self.icons, is_interface))

        return self.cache.get_or_create(node_id, create)

    def method_node(self, reference: MethodReference, current_type: Optional[TypeDefinition] = None) -> Node:
        element = reference.element_method
        element = element.model_copy(update={"declaring_type": element.declaring_type.element_type})

        definition = self.resolver.resolve_method(element)
        if definition is not None and (definition.is_getter or definition.is_setter):
            return self._accessor_node(element, definition, current_type)

        node_id = element.full_name
        return self.cache.get_or_create(
            node_id, lambda: self._create_method_node(node_id, element, definition, current_type))

    def field_node(self, reference: FieldReference, current_type: Optional[TypeDefinition] = None) -> Node:
        element = reference.model_copy(update={"declaring_type": reference.declaring_type.element_type})
        node_id = element.full_name

        def create() -> Node:
            declaring_type = self.resolver.resolve_type(element.declaring_type)
            label = self._qualify(element.name, declaring_type, current_type)
            return Node(id=node_id, label=label, kind=NodeKind.FIELD, style=field_style(self.icons))

        return self.cache.get_or_create(node_id, create)

    def property_node(self, property_definition: PropertyDefinition,
                      current_type: Optional[TypeDefinition] = None) -> Node:
        node_id = property_definition.full_name

        def create() -> Node:
            label = self._qualify(property_definition.name, property_definition.declaring_type, current_type)
            return Node(id=node_id, label=label, kind=NodeKind.PROPERTY, style=property_style(self.icons))

        return self.cache.get_or_create(node_id, create)

    def _accessor_node(self, element: MethodReference, definition: MethodDefinition,
                       current_type: Optional[TypeDefinition]) -> Node:
        declaring_type = definition.declaring_type
        property_definition = declaring_type.property_for_accessor(definition.name)
        if property_definition is not None:
            return self.property_node(property_definition, current_type)

        # Accessor without a property record: derive the property identity from the signature
        name = remove_accessor_prefix(definition.name)
        if definition.is_getter or not definition.parameters:
            property_type = definition.return_type
        else:
            property_type = definition.parameters[-1].parameter_type
        node_id = f"{property_type.full_name} {element.declaring_type.full_name}::{name}()"
        return self.cache.get_or_create(node_id, lambda: Node(
            id=node_id,
            label=self._qualify(name, declaring_type, current_type),
            kind=NodeKind.PROPERTY,
            style=property_style(self.icons),
        ))

    def _create_method_node(self, node_id: str, element: MethodReference,
                            definition: Optional[MethodDefinition],
                            current_type: Optional[TypeDefinition]) -> Node:
        declaring_type = self.resolver.resolve_type(element.declaring_type)

        local_function = parse_local_function_name(element.name)
        if local_function is not None:
            enclosing, local = local_function
            return Node(
                id=node_id,
                label=self._qualify(f"{enclosing}.{local}", declaring_type, current_type),
                kind=NodeKind.LOCAL_FUNCTION,
                style=local_function_style(self.icons),
            )

        label = element.name
        if declaring_type is not None and len(declaring_type.methods_named(element.name)) > 1:
            parameters = ", ".join(p.display_name for p in element.parameter_types)
            label = f"{element.name}({parameters})"

        return Node(
            id=node_id,
            label=self._qualify(label, declaring_type, current_type),
            kind=NodeKind.METHOD,
            style=method_style(self.icons),
        )

    def _qualify(self, label: str, declaring_type: Optional[TypeDefinition],
                 current_type: Optional[TypeDefinition]) -> str:
        if self._is_inherited(declaring_type, current_type):
            return BASE_PREFIX + label
        return label

    def _is_inherited(self, declaring_type: Optional[TypeDefinition],
                      current_type: Optional[TypeDefinition]) -> bool:
        if declaring_type is None or current_type is None or declaring_type.same_as(current_type):
            return False
        return self.resolver.is_inherited_from(current_type, declaring_type)
