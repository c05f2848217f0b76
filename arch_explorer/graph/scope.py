from typing import List, Optional, Sequence, Tuple

from ..metadata.model import TypeDefinition
from ..metadata.naming import is_compiler_generated_type

NON_USER_NAMESPACES: Tuple[str, ...] = (
    "System.Runtime.CompilerServices",
    "System.Reflection",
    "Microsoft.CodeAnalysis",
)


class ScopeFilter:
    """Decides which types are eligible to appear in the graph.

    Rules, in order: compiler-synthesized types are rejected (including types
    nested in one), then types in an empty or non-user namespace, then, when a
    namespace allowlist is configured, types whose namespace contains none of
    its entries (case-insensitive).
    """

    def __init__(self, namespace_contains: Optional[Sequence[str]] = None):
        self.namespace_contains: List[str] = [s.lower() for s in (namespace_contains or []) if s]

    @classmethod
    def from_settings(cls, settings) -> "ScopeFilter":
        return cls(settings.export_only_namespace_name_contains)

    def is_analyzable(self, type_definition: TypeDefinition) -> bool:
        current: Optional[TypeDefinition] = type_definition
        while current is not None:
            if is_compiler_generated_type(current.name):
                return False
            current = current.declaring_type

        namespace = type_definition.effective_namespace
        if not is_user_namespace(namespace):
            return False
        return self.matches_allowlist(namespace)

    def matches_allowlist(self, namespace: str) -> bool:
        if not self.namespace_contains:
            return True
        lowered = namespace.lower()
        return any(entry in lowered for entry in self.namespace_contains)


def is_user_namespace(namespace: str) -> bool:
    if not namespace:
        return False
    for excluded in NON_USER_NAMESPACES:
        if namespace == excluded or namespace.startswith(excluded + "."):
            return False
    return True
