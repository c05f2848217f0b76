from typing import Dict, List, Optional, Sequence

from ..graph.directed_graph import DirectedGraph
from ..graph.presentation import Icons, column_style, table_style
from ..types import Link, LinkCategory, Node, NodeKind
from .catalog import ColumnInfo

FOREIGN_KEY_SUFFIX = "Id"


def table_node(column: ColumnInfo, icons: Icons) -> Node:
    return Node(id=column.table_id, label=column.table_id, kind=NodeKind.TABLE, style=table_style(icons))


def column_node(column: ColumnInfo, icons: Icons) -> Node:
    return Node(
        id=column.column_id,
        label=f"{column.column_name}({column.data_type})",
        kind=NodeKind.COLUMN,
        style=column_style(icons),
    )


def _is_foreign_key(all_columns: Sequence[ColumnInfo], column: ColumnInfo, candidate: ColumnInfo) -> bool:
    """``candidate`` is the single primary key of another table and shares the column name."""
    if column.table_name == candidate.table_name:
        return False
    if column.column_name != candidate.column_name:
        return False

    primary_keys = [
        c for c in all_columns
        if c.table_name == candidate.table_name and c.is_primary_key
    ]
    return len(primary_keys) == 1 and primary_keys[0].column_name == candidate.column_name


def find_foreign_key_column(all_columns: Sequence[ColumnInfo], column: ColumnInfo,
                            preferred_foreign_keys: Optional[Dict[str, str]] = None) -> Optional[ColumnInfo]:
    if column.is_primary_key:
        return None
    if not column.column_name.endswith(FOREIGN_KEY_SUFFIX):
        return None
    if column.table_name + FOREIGN_KEY_SUFFIX == column.column_name:
        return None

    candidates = [c for c in all_columns if _is_foreign_key(all_columns, column, c)]
    if len(candidates) == 1:
        return candidates[0]
    if not candidates:
        return None

    preferred_table = (preferred_foreign_keys or {}).get(column.column_name)
    if preferred_table is None:
        return None
    for candidate in all_columns:
        if candidate.table_id == preferred_table and candidate.column_name == column.column_name:
            return candidate
    return None


def build_database_graph(columns: List[ColumnInfo], icons: Optional[Icons] = None,
                         preferred_foreign_keys: Optional[Dict[str, str]] = None) -> DirectedGraph:
    """Tables containing their columns, plus inferred foreign key links."""
    icons = icons or Icons()
    graph = DirectedGraph()

    for column in columns:
        graph.add(Link(
            source=table_node(column, icons),
            target=column_node(column, icons),
            category=LinkCategory.CONTAINS,
        ))

        foreign_key_column = find_foreign_key_column(columns, column, preferred_foreign_keys)
        if foreign_key_column is not None:
            graph.add(Link(
                source=column_node(column, icons),
                target=column_node(foreign_key_column, icons),
                category=LinkCategory.FOREIGN_KEY,
            ))

    return graph
