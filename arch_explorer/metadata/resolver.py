from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set, Tuple, Union

from ..errors import MetadataLoadError
from ..utils.logger import app_logger
from .model import (
    AssemblyDefinition,
    FieldDefinition,
    FieldReference,
    MethodDefinition,
    MethodReference,
    TypeDefinition,
    TypeReference,
)
from .reader import read_assembly_definition


class AssemblyResolver:
    """Resolves references to their definitions across loaded assemblies.

    The main assembly is always available. Referenced assemblies are looked up
    lazily as ``<scope>.json`` in the search directories; anything that cannot
    be found or read resolves to None.
    """

    def __init__(self, main_assembly: AssemblyDefinition,
                 search_directories: Iterable[Union[str, Path]] = ()):
        self.logger = app_logger.bind(component="assembly_resolver")
        self.main_assembly = main_assembly
        self.search_directories: List[Path] = [Path(d) for d in search_directories]
        self._assemblies: Dict[str, AssemblyDefinition] = {main_assembly.name: main_assembly}
        self._unavailable: Set[str] = set()

    def add(self, assembly: AssemblyDefinition):
        self._assemblies[assembly.name] = assembly
        self._unavailable.discard(assembly.name)

    def assembly_for(self, scope: Optional[str]) -> Optional[AssemblyDefinition]:
        if scope is None:
            return self.main_assembly
        if scope in self._assemblies:
            return self._assemblies[scope]
        if scope in self._unavailable:
            return None

        assembly = self._load(scope)
        if assembly is None:
            self._unavailable.add(scope)
            return None
        self._assemblies[scope] = assembly
        return assembly

    def _load(self, scope: str) -> Optional[AssemblyDefinition]:
        for directory in self.search_directories:
            candidate = directory / f"{scope}.json"
            if not candidate.is_file():
                continue
            try:
                return read_assembly_definition(candidate)
            except MetadataLoadError as e:
                self.logger.debug(f"Referenced assembly {scope} is unreadable: {e.reason}")
                return None
        self.logger.debug(f"Referenced assembly {scope} not found in search directories")
        return None

    def resolve_type(self, reference: TypeReference) -> Optional[TypeDefinition]:
        if reference.is_generic_parameter:
            return None
        assembly = self.assembly_for(reference.scope)
        if assembly is None:
            return None
        return assembly.find_type(reference.element_type.full_name)

    def resolve_method(self, reference: MethodReference) -> Optional[MethodDefinition]:
        declaring_type = self.resolve_type(reference.declaring_type)
        if declaring_type is None:
            return None

        element = reference.element_method
        candidates = declaring_type.methods_named(element.name)
        parameter_names = [p.full_name for p in element.parameter_types]
        for candidate in candidates:
            if [p.parameter_type.full_name for p in candidate.parameters] == parameter_names:
                return candidate

        # Signatures written against type arguments instead of generic parameters
        same_arity = [c for c in candidates if len(c.parameters) == len(parameter_names)]
        if len(same_arity) == 1:
            return same_arity[0]
        return None

    def resolve_field(self, reference: FieldReference) -> Optional[FieldDefinition]:
        declaring_type = self.resolve_type(reference.declaring_type)
        if declaring_type is None:
            return None
        return declaring_type.find_field(reference.name)

    def base_type_of(self, type_definition: TypeDefinition) -> Optional[TypeDefinition]:
        if type_definition.base_type is None:
            return None
        return self.resolve_type(type_definition.base_type)

    def is_inherited_from(self, derived: TypeDefinition, base: TypeDefinition) -> bool:
        """True when ``base`` is ``derived`` itself or one of its resolvable base types."""
        target = (base.scope, base.full_name)
        visited: Set[Tuple[Optional[str], str]] = set()
        current: Optional[TypeDefinition] = derived
        while current is not None:
            key = (current.scope, current.full_name)
            if key == target:
                return True
            if key in visited:
                return False
            visited.add(key)
            current = self.base_type_of(current)
        return False
