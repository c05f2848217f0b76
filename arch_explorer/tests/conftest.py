import pytest
import json
from pathlib import Path
from typing import Any, Callable, Dict, List
import sys

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from arch_explorer.metadata.model import AssemblyDefinition, parse_type_name
from arch_explorer.metadata.resolver import AssemblyResolver

SCOPE = "Shop"

VOID = "[System.Runtime]System.Void"
INT32 = "[System.Runtime]System.Int32"
DECIMAL = "[System.Runtime]System.Decimal"
STRING = "[System.Runtime]System.String"
OBJECT = "[System.Runtime]System.Object"

ENTITY_BASE = "[Shop]Shop.Core.EntityBase"
ORDER = "[Shop]Shop.Orders.Order"
ORDER_LINE = "[Shop]Shop.Orders.OrderLine"
PRINTER = "[Shop]Tools.Formatting.Printer"
GENERIC_T = {"name": "T", "is_generic_parameter": True}


def repository_of(argument: str) -> Dict[str, Any]:
    return {**parse_type_name("[Shop]Shop.Orders.Repository`1"), "generic_arguments": [argument]}


def method_ref(declaring, name: str, params=(), returns=VOID, generic_arguments=()) -> Dict[str, Any]:
    return {
        "kind": "method",
        "declaring_type": declaring,
        "name": name,
        "return_type": returns,
        "parameter_types": list(params),
        "generic_arguments": list(generic_arguments),
    }


def field_ref(declaring, name: str, field_type) -> Dict[str, Any]:
    return {"kind": "field", "declaring_type": declaring, "name": name, "field_type": field_type}


def type_operand(name: str) -> Dict[str, Any]:
    return {"kind": "type", **parse_type_name(name)}


def body(*instructions) -> List[Dict[str, Any]]:
    return [
        {"offset": offset, "opcode": opcode, "operand": operand}
        for offset, (opcode, operand) in enumerate(instructions)
    ]


def build_sample_document() -> Dict[str, Any]:
    entity_base = {
        "namespace": "Shop.Core",
        "name": "EntityBase",
        "base_type": OBJECT,
        "fields": [{"name": "<Id>k__BackingField", "field_type": INT32}],
        "properties": [{"name": "Id", "property_type": INT32, "getter": "get_Id", "setter": "set_Id"}],
        "methods": [
            {"name": ".ctor", "body": body(("call", method_ref(OBJECT, ".ctor")))},
            {"name": "get_Id", "return_type": INT32, "is_getter": True,
             "body": body(("ldarg.0", None), ("ldfld", field_ref(ENTITY_BASE, "<Id>k__BackingField", INT32)))},
            {"name": "set_Id", "is_setter": True,
             "parameters": [{"name": "value", "parameter_type": INT32}],
             "body": body(("stfld", field_ref(ENTITY_BASE, "<Id>k__BackingField", INT32)))},
            {"name": "Validate", "body": body(("ret", None))},
        ],
    }

    order = {
        "namespace": "Shop.Orders",
        "name": "Order",
        "base_type": ENTITY_BASE,
        "fields": [
            {"name": "total", "field_type": DECIMAL},
            {"name": "count", "field_type": INT32},
        ],
        "properties": [{"name": "Total", "property_type": DECIMAL, "getter": "get_Total"}],
        "methods": [
            {"name": ".ctor", "body": body(("call", method_ref(ENTITY_BASE, ".ctor")))},
            {"name": "get_Total", "return_type": DECIMAL, "is_getter": True,
             "body": body(("ldfld", field_ref(ORDER, "total", DECIMAL)))},
            {"name": "Submit", "body": body(
                ("call", method_ref(ENTITY_BASE, "Validate")),
                ("call", method_ref(ORDER, "Recalculate")),
                ("ldfld", field_ref(ORDER, "total", DECIMAL)),
                ("stfld", field_ref(ORDER, "count", INT32)),
                ("call", method_ref(ENTITY_BASE, "get_Id", returns=INT32)),
                ("newobj", method_ref(ORDER_LINE, ".ctor")),
                ("isinst", type_operand(ORDER_LINE)),
                ("call", method_ref("[System.Console]System.Console", "WriteLine", params=[STRING])),
                ("callvirt", method_ref(OBJECT, "ToString", returns=STRING)),
                ("call", method_ref(ORDER, "<Submit>g__Log|3_0")),
                ("callvirt", method_ref(repository_of(ORDER), "Save", params=[GENERIC_T])),
                ("callvirt", method_ref(repository_of(ORDER_LINE), "Save", params=[GENERIC_T])),
                ("ldfld", field_ref(ORDER, "<Name>k__BackingField", STRING)),
                ("call", method_ref(ORDER, "Recalculate", params=[DECIMAL])),
                ("call", method_ref(ORDER, "Format", params=[GENERIC_T], generic_arguments=[INT32])),
                ("call", method_ref(ORDER, "get_Total", returns=DECIMAL)),
                ("ldtoken", type_operand(ORDER)),
                ("call", method_ref("[Shop]Shop.Orders.Order/<>c", "<Submit>b__3_1")),
                ("call", method_ref(PRINTER, "Print")),
            )},
            {"name": "Recalculate", "body": body(("ret", None))},
            {"name": "Recalculate", "parameters": [{"name": "rate", "parameter_type": DECIMAL}],
             "body": body(("ret", None))},
            {"name": "<Submit>g__Log|3_0", "is_static": True, "body": body(("ret", None))},
            {"name": "Format", "generic_parameters": ["T"],
             "parameters": [{"name": "value", "parameter_type": GENERIC_T}], "body": []},
        ],
        "nested_types": [
            {"name": "<>c", "visibility": "nested_private",
             "methods": [{"name": "<Submit>b__3_1", "body": body(("ret", None))}]},
            {"name": "Status", "visibility": "nested_public"},
        ],
    }

    return {
        "name": SCOPE,
        "modules": [{
            "name": "Shop.dll",
            "types": [
                {"namespace": "", "name": "<Module>"},
                entity_base,
                order,
                {"namespace": "Shop.Orders", "name": "OrderLine",
                 "methods": [{"name": ".ctor", "body": []}]},
                {"namespace": "Shop.Orders", "name": "Repository`1", "generic_parameters": ["T"],
                 "methods": [{"name": "Save",
                              "parameters": [{"name": "item", "parameter_type": GENERIC_T}],
                              "body": []}]},
                {"namespace": "Shop.Orders", "name": "IOrderService", "is_interface": True,
                 "methods": [{"name": "Place"}]},
                {"namespace": "Tools.Formatting", "name": "Printer",
                 "methods": [{"name": "Print", "body": []}]},
                {"namespace": "Microsoft.CodeAnalysis", "name": "EmbeddedAttribute"},
            ],
        }],
    }


@pytest.fixture
def sample_document() -> Dict[str, Any]:
    """Metadata dump of a small shop application."""
    return build_sample_document()


@pytest.fixture
def sample_assembly(sample_document) -> AssemblyDefinition:
    return AssemblyDefinition.model_validate(sample_document)


@pytest.fixture
def resolver(sample_assembly) -> AssemblyResolver:
    return AssemblyResolver(sample_assembly)


@pytest.fixture
def make_assembly() -> Callable[..., AssemblyDefinition]:
    """Build a single-module assembly from type documents."""
    def factory(*types: Dict[str, Any], name: str = SCOPE) -> AssemblyDefinition:
        return AssemblyDefinition.model_validate({
            "name": name,
            "modules": [{"name": f"{name}.dll", "types": list(types)}],
        })
    return factory


@pytest.fixture
def sample_assembly_file(tmp_path, sample_document) -> Path:
    path = tmp_path / "Shop.json"
    path.write_text(json.dumps(sample_document), encoding="utf-8")
    return path
