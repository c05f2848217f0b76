from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from .config import Settings, read_config, settings as default_settings
from .database.catalog import load_columns
from .database.exporter import build_database_graph
from .errors import ArchExplorerError, CatalogLoadError, MetadataLoadError
from .export import RENDERERS
from .graph.directed_graph import DirectedGraph
from .graph.graph_creator import GraphCreator
from .graph.presentation import Icons
from .metadata.reader import read_assembly_definition
from .metadata.resolver import AssemblyResolver
from .utils.logger import app_logger

logger = app_logger.bind(component="handler")


@dataclass
class ExportResult:
    """Rendered graph or the error that prevented it."""
    content: Optional[str] = None
    graph: Optional[DirectedGraph] = None
    error: Optional[ArchExplorerError] = None

    @property
    def success(self) -> bool:
        return self.error is None


def load_settings(config_file: Optional[str] = None, base: Optional[Settings] = None) -> Settings:
    """Settings from the environment, overlaid with the JSON config file if present."""
    base = base or default_settings
    return base.with_config_file(read_config(config_file or base.config_file))


def render(graph: DirectedGraph, output_format: str) -> str:
    renderer = RENDERERS.get(output_format.lower())
    if renderer is None:
        raise ValueError(f"Unsupported output format: {output_format}")
    return renderer(graph)


def _open_assembly(assembly_file_path: Union[str, Path]):
    path = Path(assembly_file_path)
    assembly = read_assembly_definition(path)
    resolver = AssemblyResolver(assembly, search_directories=[path.parent])
    return assembly, resolver


def create_method_call_graph_of_assembly(assembly_file_path: Union[str, Path],
                                         settings: Optional[Settings] = None) -> ExportResult:
    settings = settings or default_settings
    try:
        assembly, resolver = _open_assembly(assembly_file_path)
    except MetadataLoadError as e:
        return ExportResult(error=e)

    graph = GraphCreator.from_settings(resolver, settings).create_graph(assembly)
    return ExportResult(content=render(graph, settings.output_format), graph=graph)


def create_method_call_graph_of_type(assembly_file_path: Union[str, Path], full_type_name: str,
                                     settings: Optional[Settings] = None) -> ExportResult:
    settings = settings or default_settings
    try:
        assembly, resolver = _open_assembly(assembly_file_path)
    except MetadataLoadError as e:
        return ExportResult(error=e)

    result = GraphCreator.from_settings(resolver, settings).create_type_graph(assembly, full_type_name)
    if not result.success:
        return ExportResult(error=result.error)
    return ExportResult(content=render(result.graph, settings.output_format), graph=result.graph)


def create_database_graph(catalog_file_path: Union[str, Path],
                          settings: Optional[Settings] = None) -> ExportResult:
    settings = settings or default_settings
    try:
        columns = load_columns(catalog_file_path)
    except CatalogLoadError as e:
        return ExportResult(error=e)

    graph = build_database_graph(
        columns,
        icons=Icons(settings.icon_directory),
        preferred_foreign_keys=settings.preferred_foreign_keys,
    )
    logger.info(f"Database graph built: {len(graph)} links")
    return ExportResult(content=render(graph, settings.output_format), graph=graph)
