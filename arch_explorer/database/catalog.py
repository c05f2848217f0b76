import json
from pathlib import Path
from typing import List, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..errors import CatalogLoadError
from ..utils.logger import app_logger

logger = app_logger.bind(component="catalog")


class CatalogRow(BaseModel):
    """One row of the schema/table/column catalog query."""

    model_config = ConfigDict(populate_by_name=True)

    schema_name: str = Field(alias="SchemaName")
    table_name: str = Field(alias="TableName")
    column_name: str = Field(alias="ColumnName")
    type_name: str = Field(alias="TypeName")
    max_length: int = 0
    precision: int = 0
    scale: int = 0
    is_nullable: bool = False
    is_primary_key: bool = Field(default=False, alias="IsPrimaryKey")


class ColumnInfo(BaseModel):
    """A table column with its formatted SQL type."""

    model_config = ConfigDict(frozen=True)

    schema_name: str
    table_name: str
    column_name: str
    data_type: str
    is_primary_key: bool = False

    @property
    def table_id(self) -> str:
        return f"{self.schema_name}.{self.table_name}"

    @property
    def column_id(self) -> str:
        return f"{self.schema_name}.{self.table_name}.{self.column_name}"


def format_sql_type(type_name: str, max_length: int, precision: int, scale: int) -> str:
    """Render a catalog type with its length/precision, e.g. ``nvarchar(50)``."""
    t = type_name.lower()
    if t in ("varchar", "char", "varbinary", "binary"):
        return f"{type_name}(MAX)" if max_length == -1 else f"{type_name}({max_length})"

    if t in ("nvarchar", "nchar"):
        if max_length == -1:
            return f"{type_name}(MAX)"
        # stored in bytes, two per character
        return f"{type_name}({max_length // 2})"

    if t in ("decimal", "numeric"):
        return f"{type_name}({precision},{scale})"

    if t in ("datetime2", "time", "datetimeoffset"):
        return f"{type_name}({scale})"

    return type_name


def column_from_row(row: CatalogRow) -> ColumnInfo:
    data_type = format_sql_type(row.type_name, row.max_length, row.precision, row.scale)
    return ColumnInfo(
        schema_name=row.schema_name,
        table_name=row.table_name,
        column_name=row.column_name,
        data_type=data_type + ("?" if row.is_nullable else ""),
        is_primary_key=row.is_primary_key,
    )


def load_columns(file_path: Union[str, Path]) -> List[ColumnInfo]:
    """Load a JSON array of catalog rows, in catalog order."""
    path = Path(file_path)
    if not path.is_file():
        raise CatalogLoadError(str(path), "file not found")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.error(f"Error reading catalog file {path}: {e}")
        raise CatalogLoadError(str(path), str(e)) from e

    if not isinstance(data, list):
        raise CatalogLoadError(str(path), "expected a JSON array of rows")

    try:
        columns = [column_from_row(CatalogRow.model_validate(row)) for row in data]
    except ValidationError as e:
        raise CatalogLoadError(str(path), str(e)) from e

    logger.info(f"Loaded {len(columns)} columns from {path}")
    return columns
