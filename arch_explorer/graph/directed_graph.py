from typing import Any, Dict, List

from ..types import Link, Node


class DirectedGraph:
    """Ordered collection of links. Nodes are derived from link endpoints."""

    def __init__(self):
        self._links: List[Link] = []

    def add(self, *links: Link):
        """Append links in order; identical links are kept."""
        self._links.extend(links)

    @property
    def links(self) -> List[Link]:
        return list(self._links)

    def nodes(self) -> List[Node]:
        """Distinct link endpoints in order of first appearance."""
        seen: Dict[str, Node] = {}
        for link in self._links:
            for node in (link.source, link.target):
                if node.id not in seen:
                    seen[node.id] = node
        return list(seen.values())

    def __len__(self) -> int:
        return len(self._links)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "nodes": [node.to_dict() for node in self.nodes()],
            "links": [link.to_dict() for link in self._links],
        }
