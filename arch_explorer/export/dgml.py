import xml.etree.ElementTree as ET

from ..graph.directed_graph import DirectedGraph
from ..types import Link, Node

DGML_NAMESPACE = "http://schemas.microsoft.com/vs/2009/dgml"

ET.register_namespace("", DGML_NAMESPACE)


def _tag(name: str) -> str:
    return f"{{{DGML_NAMESPACE}}}{name}"


def node_element(node: Node) -> ET.Element:
    element = ET.Element(_tag("Node"))
    element.set("Id", node.id)
    element.set("Label", node.label)
    element.set("Category", node.kind.value)
    style = node.style
    if style.icon:
        element.set("Icon", style.icon)
    if style.background:
        element.set("Background", style.background)
    if style.stroke_dash_array:
        element.set("StrokeDashArray", style.stroke_dash_array)
    if style.group:
        element.set("Group", style.group)
    return element


def link_element(link: Link) -> ET.Element:
    element = ET.Element(_tag("Link"))
    element.set("Source", link.source.id)
    element.set("Target", link.target.id)
    element.set("Category", link.category.value)
    if link.stroke_dash_array:
        element.set("StrokeDashArray", link.stroke_dash_array)
    if link.description:
        element.set("Description", link.description)
    return element


def to_dgml_element(graph: DirectedGraph) -> ET.Element:
    root = ET.Element(_tag("DirectedGraph"))
    nodes = ET.SubElement(root, _tag("Nodes"))
    links = ET.SubElement(root, _tag("Links"))
    nodes.extend(node_element(n) for n in graph.nodes())
    links.extend(link_element(l) for l in graph.links)
    return root


def to_dgml(graph: DirectedGraph) -> str:
    """Render the graph as a DGML document."""
    root = to_dgml_element(graph)
    ET.indent(root)
    return ET.tostring(root, encoding="unicode")

