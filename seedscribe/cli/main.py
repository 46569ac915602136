"""CLI commands for seedscribe."""

import json
import logging
import sys
from contextlib import closing
from pathlib import Path

import click

from seedscribe.config import CONFIG_FILENAME, Config
from seedscribe.connections import open_connection
from seedscribe.core.models import GetTableOptions
from seedscribe.excel.export import export_schema_workbook
from seedscribe.exceptions import SeedScribeError
from seedscribe.generators.helpers import HelperGenerator
from seedscribe.generators.templating import initialize_templates
from seedscribe.providers.base import SchemaQueryProvider
from seedscribe.providers.registry import get_dialect, list_dialects

logger = logging.getLogger("seedscribe")


def _load_config(config_path: Path | None) -> Config:
    if config_path is not None:
        return Config.from_toml(config_path)
    try:
        return Config.find_and_load()
    except FileNotFoundError:
        logger.debug(f"No {CONFIG_FILENAME} found; using defaults")
        return Config()


def _fail(error: Exception) -> None:
    click.echo(f"Error: {error}", err=True)
    sys.exit(1)


def _introspect(config: Config, options: GetTableOptions):
    dialect = get_dialect(config.database.dialect)
    with closing(open_connection(dialect, config.database.url)) as conn:
        return SchemaQueryProvider(conn, dialect).get_tables(options)


def _cli_options(
    config: Config,
    url: str | None,
    dialect: str | None,
    tables: tuple[str, ...],
    schemas: tuple[str, ...],
) -> None:
    if url:
        config.database.url = url
    if dialect:
        config.database.dialect = dialect
    if tables:
        config.introspection.include_tables = list(tables)
    if schemas:
        config.introspection.include_schemas = list(schemas)


url_option = click.option("--url", help="Database connection string (overrides config)")
dialect_option = click.option(
    "--dialect", type=click.Choice(list_dialects()), help="Database dialect (overrides config)"
)
table_option = click.option("--table", "tables", multiple=True, help="Only this table (repeatable)")
schema_option = click.option("--schema", "schemas", multiple=True, help="Only this schema (repeatable)")


@click.group()
@click.version_option(package_name="seedscribe")
@click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path),
              help=f"Path to {CONFIG_FILENAME} (default: search upwards from cwd)")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, verbose: bool) -> None:
    """seedscribe - schema introspection and test data helper generation."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    initialize_templates()
    ctx.obj = {"config_path": config_path}


@cli.command()
@url_option
@dialect_option
@table_option
@schema_option
@click.option("--no-columns", is_flag=True, help="List table names only")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.pass_context
def tables(
    ctx: click.Context,
    url: str | None,
    dialect: str | None,
    tables: tuple[str, ...],
    schemas: tuple[str, ...],
    no_columns: bool,
    output_json: bool,
) -> None:
    """Introspect and print tables, columns and foreign keys."""
    try:
        config = _load_config(ctx.obj["config_path"])
        _cli_options(config, url, dialect, tables, schemas)
        if no_columns:
            config.introspection.include_columns = False
            config.introspection.include_foreign_keys = False
        result = _introspect(config, config.table_options())
    except (SeedScribeError, ValueError) as e:
        _fail(e)
        return

    if output_json:
        payload = [
            {
                "schema": t.schema,
                "name": t.name,
                "full_name": t.full_name,
                "columns": [
                    {
                        "name": c.name,
                        "database_type": c.database_type,
                        "db_type": c.db_type.value,
                        "max_length": c.max_length,
                        "is_nullable": c.is_nullable,
                        "is_identity": c.is_identity,
                        "is_auto_generated": c.is_auto_generated,
                        "is_primary_key": c.is_primary_key,
                        "foreign_key": str(c.foreign_key) if c.foreign_key else None,
                    }
                    for c in t.columns
                ],
            }
            for t in result
        ]
        click.echo(json.dumps(payload, indent=2))
        return

    for table in result:
        click.echo(table.full_name)
        for column in table.columns:
            flags = []
            if column.is_primary_key:
                flags.append("pk")
            if column.is_identity:
                flags.append("identity")
            if column.is_auto_generated:
                flags.append("auto")
            if not column.is_nullable:
                flags.append("not null")
            size = f"({column.max_length})" if column.max_length else ""
            ref = f" -> {column.foreign_key}" if column.foreign_key else ""
            click.echo(
                f"  {column.name}: {column.database_type}{size} [{column.db_type.value}]"
                f"{' ' + ', '.join(flags) if flags else ''}{ref}"
            )


@cli.command("export-schema")
@url_option
@dialect_option
@table_option
@schema_option
@click.option("--output", "-o", required=True, type=click.Path(dir_okay=False, path_type=Path),
              help="Workbook file to write (.xlsx)")
@click.option("--language", type=click.Choice(["python", "csharp"]), default="python",
              help="Spelling of the Type metadata")
@click.pass_context
def export_schema(
    ctx: click.Context,
    url: str | None,
    dialect: str | None,
    tables: tuple[str, ...],
    schemas: tuple[str, ...],
    output: Path,
    language: str,
) -> None:
    """Write an annotated data workbook for the introspected schema."""
    try:
        config = _load_config(ctx.obj["config_path"])
        _cli_options(config, url, dialect, tables, schemas)
        config.introspection.include_columns = True
        result = _introspect(config, config.table_options())
        path = export_schema_workbook(result, output, language=language)
    except (SeedScribeError, ValueError) as e:
        _fail(e)
        return
    click.echo(f"✓ Exported {len(result)} tables to {path}")


@cli.command()
@click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path),
              help="Generated file (overrides config)")
@click.option("--language", type=click.Choice(["python", "csharp"]), help="Target language")
@click.pass_context
def generate(ctx: click.Context, output: Path | None, language: str | None) -> None:
    """Generate test data helpers from the configured flavor workbooks."""
    try:
        config = _load_config(ctx.obj["config_path"])
        if output is not None:
            config.generator.output = str(output)
        if language:
            config.generator.language = language
        if not config.generator.flavors:
            click.echo("Error: No flavors configured in [[generator.flavors]]", err=True)
            sys.exit(1)
        HelperGenerator(config.generator_options()).execute()
    except (SeedScribeError, FileNotFoundError, ValueError) as e:
        _fail(e)
        return
    click.echo(f"✓ Generated {config.generator.output}")


@cli.command()
@click.option("--path", type=click.Path(dir_okay=False, path_type=Path),
              default=Path(CONFIG_FILENAME), show_default=True)
@click.option("--force", is_flag=True, help="Overwrite an existing file")
def init(path: Path, force: bool) -> None:
    """Write a default configuration file."""
    if path.exists() and not force:
        click.echo(f"Error: {path} already exists (use --force to overwrite)", err=True)
        sys.exit(1)
    Config().to_toml(path)
    click.echo(f"✓ Wrote {path}")


if __name__ == "__main__":
    cli()
