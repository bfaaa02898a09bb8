"""
Connection-string resolution for SQL connections.

One pure function shared by every SQL operation (dataset data, ad-hoc
queries, table listing, table schema).
"""

from sqlalchemy.engine import URL

from beakdash.core.errors import ConfigError
from beakdash.schemas import SqlConfig

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 5432


def resolve_connection_string(config: SqlConfig) -> str:
    """
    Return ``config.connection_string`` verbatim when set, else synthesize a
    PostgreSQL URL from the discrete host/port/database/user/password fields.

    Raises ConfigError when neither is resolvable (database and
    user/username are required for synthesis).
    """
    if config.connection_string:
        return config.connection_string

    user = config.user or config.username
    if not config.database or not user:
        raise ConfigError(
            "Connection configuration is incomplete. "
            "Database and user/username are required."
        )

    url = URL.create(
        "postgresql",
        username=user,
        password=config.password or None,
        host=config.host or DEFAULT_HOST,
        port=config.port or DEFAULT_PORT,
        database=config.database,
        query={"sslmode": "require"} if config.ssl else {},
    )
    return url.render_as_string(hide_password=False)
