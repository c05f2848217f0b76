from typing import Optional


class ArchExplorerError(Exception):
    """Base error for the explorer."""


class MetadataLoadError(ArchExplorerError):
    """A metadata document could not be read or is malformed."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Failed to load metadata from {path}: {reason}")
        self.path = path
        self.reason = reason


class CatalogLoadError(ArchExplorerError):
    """A database catalog dump could not be read or is malformed."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Failed to load catalog from {path}: {reason}")
        self.path = path
        self.reason = reason


class ConfigError(ArchExplorerError):
    """The JSON config file is malformed."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Invalid config file {path}: {reason}")
        self.path = path
        self.reason = reason


class TypeNotFoundError(ArchExplorerError):
    """Requested type is not defined in the loaded assembly.

    Returned as a value by the graph creator, never raised by it.
    """

    def __init__(self, full_type_name: str, assembly_name: Optional[str] = None):
        where = f" in {assembly_name}" if assembly_name else ""
        super().__init__(f"Type not found{where}: {full_type_name}")
        self.full_type_name = full_type_name
        self.assembly_name = assembly_name
