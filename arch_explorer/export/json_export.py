import json

from ..graph.directed_graph import DirectedGraph


def to_json(graph: DirectedGraph) -> str:
    """Render the graph as ``{"nodes": [...], "links": [...]}``."""
    return json.dumps(graph.to_dict(), indent=2, ensure_ascii=False)
