"""
Configuration management for seedscribe.

Loads and validates configuration from seedscribe.toml files using Pydantic.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from seedscribe.core.models import GetTableOptions
from seedscribe.generators.helpers import Flavor, HelperGeneratorOptions
from seedscribe.providers.registry import get_dialect

CONFIG_FILENAME = "seedscribe.toml"


class DatabaseConfig(BaseSettings):
    """Database connection configuration."""

    model_config = SettingsConfigDict(env_prefix="SEEDSCRIBE_DATABASE_")

    url: str = Field(
        default="postgresql://localhost/myproject_local",
        description="Connection string passed to the dialect's DB-API driver",
    )
    dialect: str = Field(
        default="postgresql", description="Database dialect (postgresql or sqlserver)"
    )


class IntrospectionConfig(BaseSettings):
    """Table retrieval options."""

    model_config = SettingsConfigDict(env_prefix="SEEDSCRIBE_INTROSPECTION_")

    include_columns: bool = Field(default=True, description="Fetch column details")
    include_foreign_keys: bool = Field(
        default=True, description="Fetch foreign keys (requires include_columns)"
    )
    include_tables: list[str] = Field(default_factory=list, description="Tables to keep")
    exclude_tables: list[str] = Field(default_factory=list, description="Tables to drop")
    include_schemas: list[str] = Field(default_factory=list, description="Schemas to keep")
    exclude_schemas: list[str] = Field(default_factory=list, description="Schemas to drop")

    def to_options(self) -> GetTableOptions:
        """Convert to GetTableOptions (validates the column/foreign key combination)."""
        return GetTableOptions(
            include_columns=self.include_columns,
            include_foreign_keys=self.include_foreign_keys,
            include_tables=list(self.include_tables),
            exclude_tables=list(self.exclude_tables),
            include_schemas=list(self.include_schemas),
            exclude_schemas=list(self.exclude_schemas),
        )


class FlavorConfig(BaseModel):
    """One named dataset workbook."""

    name: str
    workbook: str


class GeneratorConfig(BaseSettings):
    """Helper generation configuration."""

    model_config = SettingsConfigDict(env_prefix="SEEDSCRIBE_GENERATOR_")

    output: str = Field(default="tests/data_helpers.py", description="Generated source file")
    language: str = Field(default="python", description="Target language (python or csharp)")
    namespace: str = Field(default="TestData", description="Namespace of generated C# code")
    class_name: str = Field(default="DataHelper", description="Generated top-level class name")
    flavors: list[FlavorConfig] = Field(
        default_factory=list, description="Named dataset workbooks"
    )

    def to_options(self, dialect_name: str) -> HelperGeneratorOptions:
        """Convert to HelperGeneratorOptions for the given dialect."""
        return HelperGeneratorOptions(
            output=Path(self.output),
            flavors=[Flavor(name=f.name, workbook=Path(f.workbook)) for f in self.flavors],
            language=self.language,
            dialect=get_dialect(dialect_name),
            namespace=self.namespace,
            class_name=self.class_name,
        )


class Config(BaseSettings):
    """Main configuration for seedscribe."""

    model_config = SettingsConfigDict(env_prefix="SEEDSCRIBE_", env_nested_delimiter="__")

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    introspection: IntrospectionConfig = Field(default_factory=IntrospectionConfig)
    generator: GeneratorConfig = Field(default_factory=GeneratorConfig)

    @classmethod
    def from_toml(cls, path: Path | str) -> Config:
        """
        Load configuration from TOML file.

        Relative generator paths are resolved against the file's directory.

        Args:
            path: Path to seedscribe.toml file

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config file is invalid
        """
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path, "rb") as f:
            data = tomllib.load(f)

        config = cls(**data)
        config.resolve_paths(config_path.resolve().parent)
        return config

    @classmethod
    def find_and_load(cls, start_dir: Optional[Path] = None) -> Config:
        """
        Find and load configuration from seedscribe.toml.

        Searches for seedscribe.toml starting from start_dir and walking up
        parent directories until found or reaching filesystem root.

        Raises:
            FileNotFoundError: If no config file found
        """
        if start_dir is None:
            start_dir = Path.cwd()

        current = Path(start_dir).resolve()

        # Walk up directory tree
        while True:
            config_path = current / CONFIG_FILENAME
            if config_path.exists():
                return cls.from_toml(config_path)

            parent = current.parent
            if parent == current:
                break
            current = parent

        raise FileNotFoundError(
            f"No {CONFIG_FILENAME} found in {start_dir} or parent directories. "
            f"Run 'seedscribe init' to create one."
        )

    def resolve_paths(self, base_dir: Path) -> None:
        """Make the output and flavor workbook paths absolute against base_dir."""
        output = Path(self.generator.output)
        if not output.is_absolute():
            self.generator.output = str(base_dir / output)
        for flavor in self.generator.flavors:
            workbook = Path(flavor.workbook)
            if not workbook.is_absolute():
                flavor.workbook = str(base_dir / workbook)

    def to_toml(self, path: Path | str) -> None:
        """
        Write configuration to TOML file.

        Args:
            path: Path to write seedscribe.toml
        """
        config_path = Path(path)
        intro = self.introspection
        gen = self.generator

        # Build TOML content manually for better formatting
        toml_content = f"""# seedscribe configuration

[database]
url = {json.dumps(self.database.url)}
dialect = {json.dumps(self.database.dialect)}

[introspection]
include_columns = {str(intro.include_columns).lower()}
include_foreign_keys = {str(intro.include_foreign_keys).lower()}
include_tables = {json.dumps(intro.include_tables)}
exclude_tables = {json.dumps(intro.exclude_tables)}
include_schemas = {json.dumps(intro.include_schemas)}
exclude_schemas = {json.dumps(intro.exclude_schemas)}

[generator]
output = {json.dumps(gen.output)}
language = {json.dumps(gen.language)}
namespace = {json.dumps(gen.namespace)}
class_name = {json.dumps(gen.class_name)}
"""
        for flavor in gen.flavors:
            toml_content += f"""
[[generator.flavors]]
name = {json.dumps(flavor.name)}
workbook = {json.dumps(flavor.workbook)}
"""

        config_path.write_text(toml_content)

    def table_options(self) -> GetTableOptions:
        return self.introspection.to_options()

    def generator_options(self) -> HelperGeneratorOptions:
        return self.generator.to_options(self.database.dialect)
