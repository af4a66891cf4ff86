"""Database engine utilities.

This module centralizes SQLAlchemy engine creation so every connectivity
check uses the same bounded connect timeout.
"""

from sqlalchemy import Engine, create_engine
from sqlalchemy.engine import make_url

_CONNECT_TIMEOUT_BACKENDS = frozenset({"postgresql", "mysql", "mariadb"})


def db_create_engine(database_url: str, connect_timeout_seconds: float = 5.0) -> Engine:
    """Create a SQLAlchemy engine for the configured database.

    Args:
        database_url: SQLAlchemy database URL.
        connect_timeout_seconds: Upper bound for establishing one connection.

    Returns:
        Engine: Configured SQLAlchemy engine.

    Raises:
        ValueError: Raised when the database URL is blank.
        sqlalchemy.exc.ArgumentError: Raised when the URL cannot be parsed.
    """

    if not database_url.strip():
        raise ValueError("database_url must not be blank")

    url = make_url(database_url)
    connect_args: dict[str, object] = {}
    if url.get_backend_name() in _CONNECT_TIMEOUT_BACKENDS:
        connect_args["connect_timeout"] = max(1, int(connect_timeout_seconds))
    return create_engine(url, pool_pre_ping=True, connect_args=connect_args)
