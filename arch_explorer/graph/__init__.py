"""
Graph module for building architecture graphs from assembly metadata.
"""

from .directed_graph import DirectedGraph
from .graph_creator import GraphCreator, TypeGraphResult
from .identity import NodeCache, NodeIdentityResolver
from .namespaces import build_namespace_links
from .scanner import InstructionScanner
from .scope import ScopeFilter

__all__ = [
    'DirectedGraph',
    'GraphCreator',
    'InstructionScanner',
    'NodeCache',
    'NodeIdentityResolver',
    'ScopeFilter',
    'TypeGraphResult',
    'build_namespace_links',
]
