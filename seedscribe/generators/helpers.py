"""Generate test-data helper source code from data workbooks."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from seedscribe.excel.binding import TableBindingModel, build_table_binding
from seedscribe.excel.workbook import DataExcelTable, DataExcelWorkbook
from seedscribe.exceptions import ValueSerializationError
from seedscribe.generators.serializer import SYNTAXES, LiteralSyntax, serialize_value
from seedscribe.generators.templating import LANGUAGES, initialize_templates, render_template
from seedscribe.providers.base import Dialect
from seedscribe.providers.sqlserver import SQLSERVER

logger = logging.getLogger(__name__)

DEFAULT_FLAVOR_NAME = "Default"


@dataclass
class Flavor:
    """
    Named alternate dataset.

    Attributes:
        name: Flavor name (used in generated class and method names)
        workbook: Path to the flavor's data workbook
        table_definitions: Binding models collected while generating
    """

    name: str
    workbook: Path
    table_definitions: list[TableBindingModel] = field(default_factory=list)


@dataclass
class HelperGeneratorOptions:
    """
    Options for helper generation.

    Attributes:
        output: File to write the generated source to
        flavors: Datasets to generate helpers for
        language: Target language ("python" or "csharp")
        dialect: Database dialect used for name quoting and parameters
        namespace: Namespace of generated C# code
        class_name: Name of the generated top-level class
    """

    output: Path
    flavors: list[Flavor] = field(default_factory=list)
    language: str = "python"
    dialect: Dialect = SQLSERVER
    namespace: str = "TestData"
    class_name: str = "DataHelper"

    def __post_init__(self) -> None:
        self.output = Path(self.output)
        if self.language not in LANGUAGES:
            raise ValueError(
                f"Unsupported language '{self.language}'; expected one of {', '.join(LANGUAGES)}"
            )

    @property
    def syntax(self) -> LiteralSyntax:
        return SYNTAXES[self.language]


def serialize_rows(
    table: DataExcelTable, model: TableBindingModel, syntax: LiteralSyntax
) -> list[list[str]]:
    """
    Serialize every data row of a table.

    Values of auto-generated columns are skipped, so call this before
    ``model.strip_auto_generated()``. Rows left with no values are dropped.

    Raises:
        ValueSerializationError: With the worksheet, row and column of the bad value
    """
    rows = []
    for number, values in enumerate(table.enumerate_rows(), start=1):
        literals = []
        for value, column in zip(values, model.columns):
            if column.is_auto_generated:
                continue
            try:
                literals.append(
                    serialize_value(
                        value, column.db_type, column.native_type, column.is_nullable, syntax
                    )
                )
            except ValueSerializationError as e:
                raise ValueSerializationError(
                    e.value,
                    e.db_type,
                    f"{e.reason} (worksheet '{table.sheet_name}', data row {number}, "
                    f"column '{column.name}')",
                ) from e
        if literals:
            rows.append(literals)
    return rows


class HelperGenerator:
    """Render helper code for every flavor into a single source file."""

    def __init__(self, options: HelperGeneratorOptions):
        self.options = options
        initialize_templates()

    def execute(self) -> None:
        """
        Generate the helper file.

        Does nothing when no flavors are configured. The whole file is rendered
        before anything is written, so a failure leaves an existing output
        untouched. The output directory is created when missing.

        Raises:
            MetadataError: If a workbook's tables or header metadata are invalid
            ValueSerializationError: If a cell value cannot be encoded
        """
        flavors = self.options.flavors
        if not flavors:
            logger.info("No flavors configured; nothing to generate")
            return

        parts = [self._render("header", self._common_model())]
        for flavor in flavors:
            logger.info(f"Generating data helper for {flavor.name} information.")
            flavor_name = flavor.name if len(flavors) > 1 else DEFAULT_FLAVOR_NAME
            parts.extend(self._render_flavor(flavor, flavor_name))
        parts.append(self._render("footer", self._common_model()))

        output = self.options.output
        output.parent.mkdir(parents=True, exist_ok=True)
        with open(output, "w", encoding="utf-8", newline="\n") as writer:
            writer.write("".join(parts))

        logger.info(f"Wrote {output}")

    def _render_flavor(self, flavor: Flavor, flavor_name: str) -> list[str]:
        flavor_model = {**self._common_model(), "name": flavor_name}
        parts = [self._render("flavor", flavor_model)]

        with DataExcelWorkbook(flavor.workbook) as workbook:
            tables = list(workbook.enumerate_tables())
            parts.append(
                self._render(
                    "consolidated",
                    {
                        **flavor_model,
                        "tables": [{"schema": t.schema, "name": t.table_name} for t in tables],
                    },
                )
            )

            for table in tables:
                parts.append(self._render("table", self._table_model(flavor, table)))

        parts.append(self._render("flavor_footer", flavor_model))
        return parts

    def _table_model(self, flavor: Flavor, table: DataExcelTable) -> dict[str, Any]:
        dialect = self.options.dialect
        model = build_table_binding(table)
        data_rows = serialize_rows(table, model, self.options.syntax)

        removed = model.strip_auto_generated()
        if removed:
            logger.debug(
                f"{table.display_name}: skipping auto-generated "
                f"{', '.join(c.name for c in removed)}"
            )
        flavor.table_definitions.append(model)
        logger.info(f"  {model.schema}.{model.name}: {len(data_rows)} rows")

        return {
            **self._common_model(),
            "table": model,
            "dr": data_rows,
            "full_rows": [", ".join(row) for row in data_rows],
            "has_identity_column": model.has_identity_column,
            "full_name": dialect.quote_name(model.schema, model.name),
            "column_names": [dialect.quote_identifier(c.name) for c in model.columns],
        }

    def _common_model(self) -> dict[str, Any]:
        return {
            "namespace": self.options.namespace,
            "class_name": self.options.class_name,
            "dialect": self.options.dialect.name,
            "placeholder": self.options.dialect.placeholder,
        }

    def _render(self, name: str, model: Any) -> str:
        return render_template(self.options.language, name, model)
