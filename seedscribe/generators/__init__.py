"""Helper code generation."""

from seedscribe.generators.helpers import (
    Flavor,
    HelperGenerator,
    HelperGeneratorOptions,
    serialize_rows,
)
from seedscribe.generators.serializer import CSHARP, PYTHON, LiteralSyntax, serialize_value
from seedscribe.generators.templating import initialize_templates

__all__ = [
    "CSHARP",
    "Flavor",
    "HelperGenerator",
    "HelperGeneratorOptions",
    "LiteralSyntax",
    "PYTHON",
    "initialize_templates",
    "serialize_rows",
    "serialize_value",
]
