"""
Database schema diagrams built on the same graph model.
"""

from .catalog import ColumnInfo, format_sql_type, load_columns
from .exporter import build_database_graph, find_foreign_key_column

__all__ = [
    'ColumnInfo',
    'build_database_graph',
    'find_foreign_key_column',
    'format_sql_type',
    'load_columns',
]
