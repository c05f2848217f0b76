import json
from pathlib import Path
from typing import Union

from pydantic import ValidationError

from ..errors import MetadataLoadError
from ..utils.logger import app_logger
from .model import AssemblyDefinition

logger = app_logger.bind(component="metadata_reader")


def read_assembly_definition(file_path: Union[str, Path]) -> AssemblyDefinition:
    """Load a JSON metadata dump into an AssemblyDefinition.

    Raises MetadataLoadError when the file is missing, is not JSON, or does
    not match the metadata schema. No partial model is ever returned.
    """
    path = Path(file_path)
    if not path.is_file():
        raise MetadataLoadError(str(path), "file not found")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.error(f"Error reading metadata file {path}: {e}")
        raise MetadataLoadError(str(path), str(e)) from e

    try:
        assembly = AssemblyDefinition.model_validate(data)
    except ValidationError as e:
        logger.error(f"Malformed metadata in {path}: {e.error_count()} validation errors")
        raise MetadataLoadError(str(path), str(e)) from e

    logger.info(f"Loaded assembly {assembly.name} from {path} ({assembly.type_count} types)")
    return assembly
