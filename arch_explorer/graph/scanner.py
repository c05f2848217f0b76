from typing import Callable, Dict, List, Optional

from ..metadata.model import (
    FieldReference,
    Instruction,
    MethodDefinition,
    MethodReference,
    OpCodeKind,
    TypeDefinition,
    TypeReference,
)
from ..metadata.naming import is_backing_field, is_user_member
from ..metadata.resolver import AssemblyResolver
from ..types import Link, LinkCategory
from ..utils.logger import app_logger
from .identity import NodeIdentityResolver
from .scope import ScopeFilter

ROOT_OBJECT_TYPE = "System.Object"


class InstructionScanner:
    """Turns operand references inside method bodies into usage links.

    Links are produced in instruction order. A reference only becomes a link
    when its target resolves inside the analyzed scope; unresolvable and
    external references are skipped.
    """

    def __init__(self, identity: NodeIdentityResolver, scope_filter: ScopeFilter,
                 resolver: AssemblyResolver, hierarchy_only: bool = False):
        self.logger = app_logger.bind(component="instruction_scanner")
        self.identity = identity
        self.scope_filter = scope_filter
        self.resolver = resolver
        self.hierarchy_only = hierarchy_only
        self._handlers: Dict[str, Callable[..., Optional[Link]]] = {
            "method": self._method_link,
            "field": self._field_link,
            "type": self._type_link,
        }

    def scan_type(self, type_definition: TypeDefinition) -> List[Link]:
        links = []
        for method in type_definition.methods:
            if method.has_body and is_user_member(method.name):
                links.extend(self.scan_method(method, type_definition))
        return links

    def scan_method(self, method: MethodDefinition, current_type: TypeDefinition) -> List[Link]:
        links = []
        for instruction in method.instructions:
            operand = instruction.operand
            if operand is None:
                continue
            link = self._handlers[operand.kind](instruction, operand, method, current_type)
            if link is not None:
                links.append(link)
        return links

    def _method_link(self, instruction: Instruction, reference: MethodReference,
                     method: MethodDefinition, current_type: TypeDefinition) -> Optional[Link]:
        if reference.declaring_type.element_type.full_name == ROOT_OBJECT_TYPE:
            return None
        if not is_user_member(reference.name):
            return None
        if reference.is_generic_instance:
            reference = reference.element_method

        if self._usage_target_type(reference.declaring_type, current_type) is None:
            return None

        source = self.identity.method_node(method.reference(), current_type)
        target = self.identity.method_node(reference, current_type)

        definition = self.resolver.resolve_method(reference)
        if definition is not None and definition.is_getter:
            return Link(source=source, target=target, category=LinkCategory.READS_FIELD, description="read")
        return Link(source=source, target=target, category=LinkCategory.CALLS)

    def _field_link(self, instruction: Instruction, reference: FieldReference,
                    method: MethodDefinition, current_type: TypeDefinition) -> Optional[Link]:
        if is_backing_field(reference.name) or not is_user_member(reference.name):
            return None
        if self._usage_target_type(reference.declaring_type, current_type) is None:
            return None

        source = self.identity.method_node(method.reference(), current_type)
        target = self.identity.field_node(reference, current_type)

        if instruction.opcode_kind == OpCodeKind.STORE_FIELD:
            return Link(source=source, target=target, category=LinkCategory.WRITES_FIELD, description="write")
        return Link(source=source, target=target, category=LinkCategory.READS_FIELD, description="read")

    def _type_link(self, instruction: Instruction, reference: TypeReference,
                   method: MethodDefinition, current_type: TypeDefinition) -> Optional[Link]:
        target_type = self._usage_target_type(reference, current_type)
        if target_type is None or target_type.same_as(current_type):
            return None

        return Link(
            source=self.identity.type_node(current_type.reference()),
            target=self.identity.type_node(target_type.reference()),
            category=LinkCategory.REFERENCES_TYPE,
        )

    def _usage_target_type(self, reference: TypeReference,
                           current_type: TypeDefinition) -> Optional[TypeDefinition]:
        """Resolved type of a usage target, or None when out of scope."""
        target_type = self.resolver.resolve_type(reference)
        if target_type is None:
            self.logger.debug(f"Unresolved type reference {reference.full_name}")
            return None
        if target_type.scope != current_type.scope:
            return None
        if not self.scope_filter.is_analyzable(target_type) or target_type.is_nested_private:
            return None
        if self.hierarchy_only and not self.resolver.is_inherited_from(current_type, target_type):
            return None
        return target_type
