"""
Metadata object model, reader and reference resolution.
"""

from .model import (
    AssemblyDefinition,
    FieldDefinition,
    FieldReference,
    Instruction,
    MethodDefinition,
    MethodReference,
    ModuleDefinition,
    OpCodeKind,
    Operand,
    PropertyDefinition,
    TypeDefinition,
    TypeReference,
    TypeVisibility,
)
from .reader import read_assembly_definition
from .resolver import AssemblyResolver

__all__ = [
    'AssemblyDefinition',
    'AssemblyResolver',
    'FieldDefinition',
    'FieldReference',
    'Instruction',
    'MethodDefinition',
    'MethodReference',
    'ModuleDefinition',
    'OpCodeKind',
    'Operand',
    'PropertyDefinition',
    'TypeDefinition',
    'TypeReference',
    'TypeVisibility',
    'read_assembly_definition',
]
