from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SETTINGS_PATH = Path(__file__).resolve().parents[2] / "config" / "settings.yaml"


class Neo4jSettingsModel(BaseSettings):
    """Connection details for the Neo4j transaction graph."""

    uri: str = "bolt://localhost:7687"
    user: str = "neo4j"
    password: str = "password"
    database: str = "neo4j"
    max_connection_lifetime: int = 3600
    max_connection_pool_size: int = 50
    connection_acquisition_timeout: float = 60.0
    query_timeout: float = 30.0

    model_config = SettingsConfigDict(env_prefix="NEO4J_", env_file=".env", extra="ignore")


class AppSettingsModel(BaseModel):
    """HTTP application settings."""

    name: str = "Transaction Graph Analyzer"
    version: str = "0.1.0"
    host: str = "0.0.0.0"
    port: int = 8000
    uvicorn_reload: bool = False
    cors_allowed_origins_str: str = "*"
    log_level: str = "INFO"

    model_config = ConfigDict(extra="forbid")


class GraphSettingsModel(BaseModel):
    """Result size limits pushed down into the Cypher queries."""

    single_account_limit: int = Field(default=300, gt=0)
    batch_account_limit: int = Field(default=40, gt=0)
    centrality_limit: int = Field(default=10, gt=0)

    model_config = ConfigDict(extra="forbid")


class SettingsFileModel(BaseModel):
    """Schema for validating `settings.yaml`."""

    app: AppSettingsModel = Field(default_factory=AppSettingsModel)
    graph: GraphSettingsModel = Field(default_factory=GraphSettingsModel)

    model_config = ConfigDict(extra="forbid")


class RuntimeSettings(BaseSettings):
    """Central runtime settings loaded from YAML and environment."""

    app: AppSettingsModel = Field(
        default_factory=AppSettingsModel,
        description="Web application configuration",
    )
    graph: GraphSettingsModel = Field(
        default_factory=GraphSettingsModel,
        description="Query result limits",
    )
    neo4j: Neo4jSettingsModel = Field(
        default_factory=Neo4jSettingsModel,
        description="Neo4j connection options",
    )

    model_config = SettingsConfigDict(
        env_file=".env", env_nested_delimiter="__", extra="ignore"
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        # Environment beats values read from settings.yaml.
        return env_settings, dotenv_settings, init_settings, file_secret_settings


def validate_config_schema(config_data: dict) -> bool:
    """Validate settings data against the Pydantic schema."""

    try:
        SettingsFileModel.model_validate(config_data)
    except ValidationError as exc:
        raise ValueError(str(exc)) from exc
    return True


def load_runtime_settings(
    path: Optional[Union[str, Path]] = None,
) -> RuntimeSettings:
    """
    Load runtime settings from a YAML file and environment variables.

    If the YAML file exists its contents are validated against
    ``SettingsFileModel`` and used as defaults; environment variables
    (``APP__LOG_LEVEL``, ``GRAPH__BATCH_ACCOUNT_LIMIT``, ``NEO4J_URI``...)
    take precedence.

    Args:
        path: Location of the YAML file. Defaults to ``config/settings.yaml``
            at the repository root.

    Returns:
        RuntimeSettings: The combined runtime settings.

    Raises:
        ValueError: If the YAML file does not match the schema.
    """

    yaml_path = Path(path) if path else DEFAULT_SETTINGS_PATH
    data: dict[str, Any] = {}
    if yaml_path.exists():
        with open(yaml_path) as fh:
            data = yaml.safe_load(fh) or {}
        validate_config_schema(data)
    return RuntimeSettings(**data)


runtime_settings = load_runtime_settings()

settings = runtime_settings
