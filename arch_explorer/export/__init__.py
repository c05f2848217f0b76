"""
Renderers turning a DirectedGraph into a graph-description document.
"""

from .dgml import to_dgml
from .json_export import to_json

RENDERERS = {
    "dgml": to_dgml,
    "json": to_json,
}

__all__ = [
    'RENDERERS',
    'to_dgml',
    'to_json',
]
