"""Registry of database dialects."""

from seedscribe.exceptions import UnknownDialectError
from seedscribe.providers.base import Dialect
from seedscribe.providers.postgresql import POSTGRESQL
from seedscribe.providers.sqlserver import SQLSERVER


class DialectRegistry:
    """Registry mapping dialect names (and aliases) to Dialect descriptors."""

    def __init__(self):
        self._dialects: dict[str, Dialect] = {}

    def register(self, dialect: Dialect, *aliases: str) -> None:
        """
        Register a dialect under its name and any aliases.

        Args:
            dialect: Dialect descriptor
            *aliases: Extra lookup names (e.g. "mssql")

        Raises:
            ValueError: If the dialect is missing one of its catalog queries
        """
        for attr in ("tables_query", "columns_query", "references_query"):
            if not getattr(dialect, attr).strip():
                raise ValueError(f"Dialect '{dialect.name}' has an empty {attr}.")
        for name in (dialect.name, *aliases):
            self._dialects[name.lower()] = dialect

    def get(self, name: str) -> Dialect:
        """
        Get dialect by name or alias (case-insensitive).

        Raises:
            UnknownDialectError: If nothing is registered under name
        """
        try:
            return self._dialects[name.lower()]
        except KeyError:
            raise UnknownDialectError(name, self.list_dialects()) from None

    def list_dialects(self) -> list[str]:
        """List canonical names of registered dialects."""
        return sorted({d.name for d in self._dialects.values()})


# Global registry instance
_registry = DialectRegistry()
_registry.register(SQLSERVER, "mssql")
_registry.register(POSTGRESQL, "postgres", "pg")


def register_dialect(dialect: Dialect, *aliases: str) -> None:
    """
    Register a custom dialect (user-facing API).

    Example:
        >>> register_dialect(Dialect(name="mydb", ...), "my")
        >>> provider = SchemaQueryProvider(conn, get_dialect("my"))
    """
    _registry.register(dialect, *aliases)


def get_dialect(name: str) -> Dialect:
    """Get a registered dialect by name or alias."""
    return _registry.get(name)


def list_dialects() -> list[str]:
    """List canonical names of registered dialects."""
    return _registry.list_dialects()
