from typing import Dict, Any, Optional
from dataclasses import dataclass, field
from enum import Enum


class NodeKind(Enum):
    """Node kind enumeration."""
    NAMESPACE = "Namespace"
    TYPE = "Type"
    METHOD = "Method"
    FIELD = "Field"
    PROPERTY = "Property"
    LOCAL_FUNCTION = "LocalFunction"
    TABLE = "Table"
    COLUMN = "Column"


class LinkCategory(Enum):
    """Link category enumeration."""
    CONTAINS = "Contains"
    CALLS = "Calls"
    READS_FIELD = "ReadsField"
    WRITES_FIELD = "WritesField"
    REFERENCES_TYPE = "ReferencesType"
    FOREIGN_KEY = "ForeignKey"


DASHED = "5,5"


@dataclass(frozen=True)
class NodeStyle:
    """Visual attributes of a node."""
    icon: Optional[str] = None
    background: Optional[str] = None
    stroke_dash_array: Optional[str] = None
    group: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, unset attributes omitted."""
        values = {
            "icon": self.icon,
            "background": self.background,
            "stroke_dash_array": self.stroke_dash_array,
            "group": self.group,
        }
        return {k: v for k, v in values.items() if v is not None}


@dataclass(frozen=True)
class Node:
    """Represents a node in the architecture graph. Equality is by id only."""
    id: str
    label: str = field(compare=False)
    kind: NodeKind = field(compare=False)
    style: NodeStyle = field(default=NodeStyle(), compare=False)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "label": self.label,
            "kind": self.kind.value,
            **self.style.to_dict(),
        }


@dataclass(frozen=True)
class Link:
    """Represents a directed edge between two nodes."""
    source: Node
    target: Node
    category: LinkCategory
    description: Optional[str] = None

    def __post_init__(self):
        if self.source is None or self.target is None:
            raise ValueError("Link endpoints must not be None")

    @property
    def stroke_dash_array(self) -> Optional[str]:
        if self.category == LinkCategory.READS_FIELD:
            return DASHED
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        data = {
            "source": self.source.id,
            "target": self.target.id,
            "category": self.category.value,
        }
        if self.stroke_dash_array:
            data["stroke_dash_array"] = self.stroke_dash_array
        if self.description:
            data["description"] = self.description
        return data
