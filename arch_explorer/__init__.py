"""
Architecture explorer: containment and usage graphs from compiled-assembly metadata.
"""

__version__ = "0.1.0"
