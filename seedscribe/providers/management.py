"""Schema-modifying operations."""

import logging
from typing import Any, Iterable

from seedscribe.exceptions import UnsupportedOperationError
from seedscribe.providers.base import Dialect

logger = logging.getLogger(__name__)


class DbManagementProvider:
    """
    Schema management over a borrowed connection.

    No shipped dialect executes scripts: seedscribe reads schema, it never
    changes it. Operations fail loudly instead of silently doing nothing.
    """

    def __init__(self, connection: Any, dialect: Dialect):
        self.connection = connection
        self.dialect = dialect

    def execute_scripts(self, scripts: Iterable[str]) -> None:
        """
        Execute SQL scripts against the database.

        Raises:
            UnsupportedOperationError: Always, for every shipped dialect
        """
        logger.warning(f"Script execution requested for dialect '{self.dialect.name}'")
        raise UnsupportedOperationError("execute_scripts", self.dialect.name)
