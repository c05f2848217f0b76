"""
In-memory metadata model of a compiled assembly.

Mirrors the object model an IL reader exposes: assemblies hold modules, modules
hold type definitions, types hold members, and method bodies hold instructions
whose operands reference other entities. Full names follow IL conventions
(``Ns.Outer/Inner``, ``Ns.List`1<System.Int32>``, ``Ret Ns.T::M(P1,P2)``).
"""
from enum import Enum
from typing import Annotated, Any, Dict, Iterator, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, model_validator


def parse_type_name(value: str) -> Dict[str, Any]:
    """Parse the ``[Scope]Namespace.Outer/Inner`` shorthand into a reference document."""
    scope = None
    text = value.strip()
    if text.startswith("["):
        end = text.index("]")
        scope = text[1:end]
        text = text[end + 1:]

    outer, *nested = text.split("/")
    namespace, _, name = outer.rpartition(".")
    document: Dict[str, Any] = {"scope": scope, "namespace": namespace, "name": name}
    for nested_name in nested:
        document = {"scope": scope, "namespace": "", "name": nested_name, "declaring_type": document}
    return document


def _strip_arity(name: str) -> str:
    return name.split("`", 1)[0]


class TypeReference(BaseModel):
    """Reference to a type, possibly a generic instantiation."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["type"] = "type"
    scope: Optional[str] = None
    namespace: str = ""
    name: str
    declaring_type: Optional["TypeReference"] = None
    generic_arguments: List["TypeReference"] = Field(default_factory=list)
    is_generic_parameter: bool = False

    @model_validator(mode="before")
    @classmethod
    def _parse_shorthand(cls, data: Any) -> Any:
        if isinstance(data, str):
            return parse_type_name(data)
        return data

    @property
    def is_generic_instance(self) -> bool:
        return bool(self.generic_arguments)

    @property
    def element_type(self) -> "TypeReference":
        """The unbound generic definition of this reference."""
        if not self.generic_arguments:
            return self
        return self.model_copy(update={"generic_arguments": []})

    @property
    def full_name(self) -> str:
        if self.declaring_type is not None:
            name = f"{self.declaring_type.element_type.full_name}/{self.name}"
        elif self.namespace:
            name = f"{self.namespace}.{self.name}"
        else:
            name = self.name
        if self.generic_arguments:
            name += "<" + ",".join(a.full_name for a in self.generic_arguments) + ">"
        return name

    @property
    def display_name(self) -> str:
        name = _strip_arity(self.name)
        if self.generic_arguments:
            name += "<" + ", ".join(a.display_name for a in self.generic_arguments) + ">"
        return name


VOID = TypeReference(scope=None, namespace="System", name="Void")


class MethodReference(BaseModel):
    """Reference to a method, possibly a generic method instantiation."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["method"] = "method"
    declaring_type: TypeReference
    name: str
    return_type: TypeReference = Field(default_factory=lambda: VOID)
    parameter_types: List[TypeReference] = Field(default_factory=list)
    generic_arguments: List[TypeReference] = Field(default_factory=list)

    @property
    def is_generic_instance(self) -> bool:
        return bool(self.generic_arguments)

    @property
    def element_method(self) -> "MethodReference":
        if not self.generic_arguments:
            return self
        return self.model_copy(update={"generic_arguments": []})

    @property
    def full_name(self) -> str:
        generic = ""
        if self.generic_arguments:
            generic = "<" + ",".join(a.full_name for a in self.generic_arguments) + ">"
        parameters = ",".join(p.full_name for p in self.parameter_types)
        return f"{self.return_type.full_name} {self.declaring_type.full_name}::{self.name}{generic}({parameters})"


class FieldReference(BaseModel):
    """Reference to a field."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["field"] = "field"
    declaring_type: TypeReference
    name: str
    field_type: TypeReference

    @property
    def full_name(self) -> str:
        return f"{self.field_type.full_name} {self.declaring_type.full_name}::{self.name}"


Operand = Annotated[Union[MethodReference, FieldReference, TypeReference], Field(discriminator="kind")]


class OpCodeKind(Enum):
    """Coarse classification of IL opcodes by what they do with their operand."""
    LOAD_FIELD = "load_field"
    STORE_FIELD = "store_field"
    CALL = "call"
    NEW_OBJECT = "new_object"
    TYPE_TOKEN = "type_token"
    OTHER = "other"


LOAD_FIELD_OPCODES = {"ldfld", "ldsfld", "ldflda", "ldsflda"}
STORE_FIELD_OPCODES = {"stfld", "stsfld"}
CALL_OPCODES = {"call", "callvirt", "calli", "jmp", "ldftn", "ldvirtftn"}
NEW_OBJECT_OPCODES = {"newobj"}
TYPE_TOKEN_OPCODES = {
    "ldtoken", "box", "unbox", "unbox.any", "castclass", "isinst", "newarr",
    "initobj", "sizeof", "ldobj", "stobj", "cpobj", "ldelema", "ldelem", "stelem",
    "mkrefany", "refanyval", "constrained.",
}


class Instruction(BaseModel):
    offset: int = 0
    opcode: str
    operand: Optional[Operand] = None

    @property
    def opcode_kind(self) -> OpCodeKind:
        opcode = self.opcode.lower()
        if opcode in LOAD_FIELD_OPCODES:
            return OpCodeKind.LOAD_FIELD
        if opcode in STORE_FIELD_OPCODES:
            return OpCodeKind.STORE_FIELD
        if opcode in CALL_OPCODES:
            return OpCodeKind.CALL
        if opcode in NEW_OBJECT_OPCODES:
            return OpCodeKind.NEW_OBJECT
        if opcode in TYPE_TOKEN_OPCODES:
            return OpCodeKind.TYPE_TOKEN
        return OpCodeKind.OTHER


class ParameterDefinition(BaseModel):
    name: str = ""
    parameter_type: TypeReference


class _MemberDefinition(BaseModel):
    _declaring_type: Optional["TypeDefinition"] = PrivateAttr(default=None)

    @property
    def declaring_type(self) -> "TypeDefinition":
        return self._declaring_type


class MethodDefinition(_MemberDefinition):
    name: str
    return_type: TypeReference = Field(default_factory=lambda: VOID)
    parameters: List[ParameterDefinition] = Field(default_factory=list)
    is_static: bool = False
    is_getter: bool = False
    is_setter: bool = False
    generic_parameters: List[str] = Field(default_factory=list)
    body: Optional[List[Instruction]] = None

    @property
    def has_body(self) -> bool:
        return self.body is not None

    @property
    def instructions(self) -> List[Instruction]:
        return self.body or []

    def reference(self) -> MethodReference:
        return MethodReference(
            declaring_type=self.declaring_type.reference(),
            name=self.name,
            return_type=self.return_type,
            parameter_types=[p.parameter_type for p in self.parameters],
        )

    @property
    def full_name(self) -> str:
        return self.reference().full_name


class FieldDefinition(_MemberDefinition):
    name: str
    field_type: TypeReference
    is_static: bool = False

    def reference(self) -> FieldReference:
        return FieldReference(
            declaring_type=self.declaring_type.reference(),
            name=self.name,
            field_type=self.field_type,
        )

    @property
    def full_name(self) -> str:
        return self.reference().full_name


class PropertyDefinition(_MemberDefinition):
    name: str
    property_type: TypeReference
    getter: Optional[str] = None
    setter: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.property_type.full_name} {self.declaring_type.full_name}::{self.name}()"


class TypeVisibility(Enum):
    PUBLIC = "public"
    INTERNAL = "internal"
    NESTED_PUBLIC = "nested_public"
    NESTED_PRIVATE = "nested_private"
    NESTED_FAMILY = "nested_family"
    NESTED_ASSEMBLY = "nested_assembly"
    NESTED_FAMILY_OR_ASSEMBLY = "nested_family_or_assembly"
    NESTED_FAMILY_AND_ASSEMBLY = "nested_family_and_assembly"


class TypeDefinition(BaseModel):
    namespace: str = ""
    name: str
    visibility: TypeVisibility = TypeVisibility.PUBLIC
    is_interface: bool = False
    base_type: Optional[TypeReference] = None
    generic_parameters: List[str] = Field(default_factory=list)
    fields: List[FieldDefinition] = Field(default_factory=list)
    properties: List[PropertyDefinition] = Field(default_factory=list)
    methods: List[MethodDefinition] = Field(default_factory=list)
    nested_types: List["TypeDefinition"] = Field(default_factory=list)

    _declaring_type: Optional["TypeDefinition"] = PrivateAttr(default=None)
    _scope: Optional[str] = PrivateAttr(default=None)

    @property
    def declaring_type(self) -> Optional["TypeDefinition"]:
        return self._declaring_type

    @property
    def scope(self) -> Optional[str]:
        """Name of the assembly that defines this type."""
        return self._scope

    @property
    def is_nested(self) -> bool:
        return self._declaring_type is not None

    @property
    def is_nested_private(self) -> bool:
        return self.visibility == TypeVisibility.NESTED_PRIVATE

    @property
    def full_name(self) -> str:
        if self._declaring_type is not None:
            return f"{self._declaring_type.full_name}/{self.name}"
        if self.namespace:
            return f"{self.namespace}.{self.name}"
        return self.name

    @property
    def effective_namespace(self) -> str:
        """Namespace of the outermost declaring type; nested types carry none of their own."""
        outer = self
        while outer._declaring_type is not None:
            outer = outer._declaring_type
        return outer.namespace

    @property
    def display_name(self) -> str:
        name = _strip_arity(self.name)
        if self.generic_parameters:
            name += "<" + ", ".join(self.generic_parameters) + ">"
        return name

    def reference(self) -> TypeReference:
        if self._declaring_type is not None:
            return TypeReference(
                scope=self._scope,
                name=self.name,
                declaring_type=self._declaring_type.reference(),
            )
        return TypeReference(scope=self._scope, namespace=self.namespace, name=self.name)

    def methods_named(self, name: str) -> List[MethodDefinition]:
        return [m for m in self.methods if m.name == name]

    def find_field(self, name: str) -> Optional[FieldDefinition]:
        for field_definition in self.fields:
            if field_definition.name == name:
                return field_definition
        return None

    def property_for_accessor(self, accessor_name: str) -> Optional[PropertyDefinition]:
        for property_definition in self.properties:
            if accessor_name in (property_definition.getter, property_definition.setter):
                return property_definition
        return None

    def same_as(self, other: Optional["TypeDefinition"]) -> bool:
        return other is not None and (self.scope, self.full_name) == (other.scope, other.full_name)


class ModuleDefinition(BaseModel):
    name: str
    types: List[TypeDefinition] = Field(default_factory=list)


class AssemblyDefinition(BaseModel):
    name: str
    modules: List[ModuleDefinition] = Field(default_factory=list)

    _types_by_name: Dict[str, TypeDefinition] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context: Any) -> None:
        for type_definition in self.iter_types():
            self._types_by_name.setdefault(type_definition.full_name, type_definition)

    def iter_types(self) -> Iterator[TypeDefinition]:
        """All types in declaration order, nested types right after their declaring type.

        Wires declaring-type and scope back references on the way.
        """
        for module in self.modules:
            stack = list(reversed(module.types))
            while stack:
                type_definition = stack.pop()
                type_definition._scope = self.name
                for member in (*type_definition.methods, *type_definition.fields, *type_definition.properties):
                    member._declaring_type = type_definition
                for nested in reversed(type_definition.nested_types):
                    nested._declaring_type = type_definition
                    stack.append(nested)
                yield type_definition

    def find_type(self, full_name: str) -> Optional[TypeDefinition]:
        return self._types_by_name.get(full_name)

    @property
    def type_count(self) -> int:
        return len(self._types_by_name)
