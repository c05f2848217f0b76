from ..types import DASHED, NodeStyle

COLLAPSED = "Collapsed"
EXPANDED = "Expanded"

PROPERTY_BACKGROUND = "#f2f4f7"
FIELD_BACKGROUND = "#90B9F5"
LOCAL_FUNCTION_BACKGROUND = "#e8f1e4"
COLUMN_BACKGROUND = "#e5e9ee"


class Icons:
    """Icon paths relative to a configurable image directory."""

    def __init__(self, directory: str = "img"):
        self.directory = directory.rstrip("/\\")

    def image(self, file_name: str) -> str:
        if not self.directory:
            return file_name
        return f"{self.directory}/{file_name}"

    @property
    def class_icon(self) -> str:
        return self.image("class.png")

    @property
    def interface_icon(self) -> str:
        return self.image("interface.png")

    @property
    def method_icon(self) -> str:
        return self.image("method.png")

    @property
    def field_icon(self) -> str:
        return self.image("field.png")

    @property
    def namespace_icon(self) -> str:
        return self.image("namespace.png")


def namespace_style(icons: Icons) -> NodeStyle:
    return NodeStyle(icon=icons.namespace_icon, group=EXPANDED)


def type_style(icons: Icons, is_interface: bool = False) -> NodeStyle:
    icon = icons.interface_icon if is_interface else icons.class_icon
    return NodeStyle(icon=icon, group=COLLAPSED)


def method_style(icons: Icons) -> NodeStyle:
    return NodeStyle(icon=icons.method_icon)


def local_function_style(icons: Icons) -> NodeStyle:
    return NodeStyle(icon=icons.method_icon, background=LOCAL_FUNCTION_BACKGROUND)


def property_style(icons: Icons) -> NodeStyle:
    return NodeStyle(icon=icons.method_icon, background=PROPERTY_BACKGROUND, stroke_dash_array=DASHED)


def field_style(icons: Icons) -> NodeStyle:
    return NodeStyle(icon=icons.field_icon, background=FIELD_BACKGROUND, stroke_dash_array=DASHED)


def table_style(icons: Icons) -> NodeStyle:
    return NodeStyle(icon=icons.class_icon, group=COLLAPSED)


def column_style(icons: Icons) -> NodeStyle:
    return NodeStyle(icon=icons.field_icon, background=COLUMN_BACKGROUND)
