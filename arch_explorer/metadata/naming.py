"""
Fixed-affix predicates for names the C# compiler synthesizes.

    <Module>                        module pseudo type
    <>f__AnonymousType0`2           anonymous type
    <>c, <>c__DisplayClass3_0       closure containers
    <Name>k__BackingField           auto-property backing field
    <Enclosing>g__Local|3_0         local function
    get_Name / set_Name             property accessors

Anything else starting with ``<`` is treated as compiler generated.
"""
from typing import Optional, Tuple

MODULE_TYPE_NAME = "<Module>"
ANONYMOUS_TYPE_PREFIX = "<>f__AnonymousType"
CLOSURE_TYPE_PREFIX = "<>c"
COMPILER_GENERATED_PREFIX = "<"
BACKING_FIELD_SUFFIX = ">k__BackingField"
LOCAL_FUNCTION_MARKER = ">g__"
LOCAL_FUNCTION_SUFFIX_SEPARATOR = "|"
GETTER_PREFIX = "get_"
SETTER_PREFIX = "set_"


def is_module_type(name: str) -> bool:
    return name == MODULE_TYPE_NAME


def is_anonymous_type(name: str) -> bool:
    return name.startswith(ANONYMOUS_TYPE_PREFIX)


def is_closure_type(name: str) -> bool:
    return name.startswith(CLOSURE_TYPE_PREFIX)


def is_compiler_generated_name(name: str) -> bool:
    return name.startswith(COMPILER_GENERATED_PREFIX)


def is_compiler_generated_type(name: str) -> bool:
    return (
        is_module_type(name)
        or is_anonymous_type(name)
        or is_closure_type(name)
        or is_compiler_generated_name(name)
    )


def is_backing_field(name: str) -> bool:
    return name.endswith(BACKING_FIELD_SUFFIX)


def parse_local_function_name(name: str) -> Optional[Tuple[str, str]]:
    """Split ``<Enclosing>g__Local|3_0`` into ``("Enclosing", "Local")``."""
    if not name.startswith(COMPILER_GENERATED_PREFIX):
        return None
    marker = name.find(LOCAL_FUNCTION_MARKER)
    if marker < 0:
        return None

    enclosing = name[1:marker]
    local = name[marker + len(LOCAL_FUNCTION_MARKER):]
    separator = local.find(LOCAL_FUNCTION_SUFFIX_SEPARATOR)
    if separator >= 0:
        local = local[:separator]
    if not enclosing or not local:
        return None
    return enclosing, local


def is_local_function(name: str) -> bool:
    return parse_local_function_name(name) is not None


def is_user_member(name: str) -> bool:
    """Member written by hand: not compiler generated, local functions excepted."""
    return not is_compiler_generated_name(name) or is_local_function(name)


def remove_accessor_prefix(name: str) -> str:
    for prefix in (GETTER_PREFIX, SETTER_PREFIX):
        if name.lower().startswith(prefix):
            return name[len(prefix):]
    return name
