"""Process-wide Jinja2 environment for helper templates."""

import logging
import re
from typing import Any

from jinja2 import Environment, PackageLoader, StrictUndefined

from seedscribe.generators.serializer import quote

logger = logging.getLogger(__name__)

LANGUAGES = ("python", "csharp")

_environment: Environment | None = None


def _words(text: str) -> list[str]:
    # Split on non-alphanumerics and lower-to-upper camel humps
    spaced = re.sub(r"([a-z0-9])([A-Z])", r"\1 \2", text)
    return [w for w in re.split(r"[^0-9A-Za-z]+", spaced) if w]


def snake_case(text: str) -> str:
    """OrderItems -> order_items; "Line Item" -> line_item."""
    name = "_".join(w.lower() for w in _words(text)) or "_"
    return f"_{name}" if name[0].isdigit() else name


def pascal_case(text: str) -> str:
    """order_items -> OrderItems; dbo -> Dbo."""
    name = "".join(w[:1].upper() + w[1:] for w in _words(text)) or "_"
    return f"_{name}" if name[0].isdigit() else name


def initialize_templates() -> Environment:
    """
    Build the shared template environment and register its filters.

    Call once at process start. Repeated calls return the existing
    environment unchanged.
    """
    global _environment
    if _environment is None:
        env = Environment(
            loader=PackageLoader("seedscribe", "generators/templates"),
            autoescape=False,
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        env.filters["snake_case"] = snake_case
        env.filters["pascal_case"] = pascal_case
        env.filters["quote"] = quote
        _environment = env
        logger.debug("Template environment initialized")
    return _environment


def get_environment() -> Environment:
    """
    Get the shared template environment.

    Raises:
        RuntimeError: If initialize_templates() has not been called
    """
    if _environment is None:
        raise RuntimeError("Template environment not initialized; call initialize_templates() first.")
    return _environment


def render_template(language: str, name: str, model: Any) -> str:
    """Render ``templates/<language>/<name>.j2`` with ``model`` bound as ``model``."""
    template = get_environment().get_template(f"{language}/{name}.j2")
    return template.render(model=model)
