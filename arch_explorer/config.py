import json
from pathlib import Path
from typing import Optional, List, Dict, Literal
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from .errors import ConfigError


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Scope Configuration
    config_file: str = Field(default="Config.json")
    export_only_namespace_name_contains: List[str] = Field(default_factory=list)
    type_graph_hierarchy_only: bool = Field(default=False)

    # Output Configuration
    output_format: Literal["dgml", "json"] = Field(default="dgml")
    output_directory: str = Field(default=".")
    icon_directory: str = Field(default="img")

    # Database Diagram Configuration
    preferred_foreign_keys: Dict[str, str] = Field(default_factory=dict)

    # Logging Configuration
    log_level: str = Field(default="INFO")
    log_file: Optional[str] = Field(default=None)

    @property
    def output_path(self) -> Path:
        """Get output directory path."""
        return Path(self.output_directory)

    def with_config_file(self, config: Optional["ExplorerConfig"]) -> "Settings":
        """Overlay values read from the JSON config file."""
        if config is None:
            return self
        return self.model_copy(update={
            "export_only_namespace_name_contains": list(config.export_only_namespace_name_contains),
        })


class ExplorerConfig(BaseModel):
    """Contents of Config.json, camelCase on disk."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    export_only_namespace_name_contains: List[str] = Field(default_factory=list)


def read_config(file_path: str) -> Optional[ExplorerConfig]:
    """Read the JSON config file; returns None when the file does not exist."""
    path = Path(file_path)
    if not path.exists():
        return None

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return ExplorerConfig.model_validate(data or {})
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, ValidationError) as e:
        raise ConfigError(str(path), str(e)) from e


settings = Settings()
