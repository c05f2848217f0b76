from typing import List

from ..types import Link, LinkCategory, Node
from .identity import NodeIdentityResolver


def namespace_prefixes(namespace: str) -> List[str]:
    """``"A.B.C"`` -> ``["A", "A.B", "A.B.C"]``; empty segments are dropped."""
    segments = [s for s in namespace.split(".") if s]
    return [".".join(segments[:i + 1]) for i in range(len(segments))]


def build_namespace_links(namespace: str, type_node: Node, identity: NodeIdentityResolver) -> List[Link]:
    """Contains chain from the outermost namespace segment down to the type."""
    prefixes = namespace_prefixes(namespace) or [""]
    namespace_nodes = [identity.namespace_node(prefix) for prefix in prefixes]

    links = [
        Link(source=outer, target=inner, category=LinkCategory.CONTAINS)
        for outer, inner in zip(namespace_nodes, namespace_nodes[1:])
    ]
    links.append(Link(source=namespace_nodes[-1], target=type_node, category=LinkCategory.CONTAINS))
    return links
