"""Schema migrations for the catalog database.

Revisions live in ``versions/``. The Alembic version row is kept in its own
``shelfwise_schema_version`` table so the catalog can share a database with
other Alembic-managed applications.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Final

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory

from shelfwise.config import get_database_config

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection, Engine

log = logging.getLogger(__name__)

VERSION_TABLE: Final[str] = "shelfwise_schema_version"
MIGRATIONS_PATH: Final[Path] = Path(__file__).resolve().parent
PYPROJECT_PATH: Final[Path] = MIGRATIONS_PATH.parents[4] / "pyproject.toml"


def _pyproject_options() -> dict[str, str]:
    """String options from ``[tool.alembic]``; empty outside a source checkout."""

    if not PYPROJECT_PATH.is_file():
        return {}
    with PYPROJECT_PATH.open("rb") as handle:
        section = tomllib.load(handle).get("tool", {}).get("alembic", {})
    return {str(key): value for key, value in section.items() if isinstance(value, str)}


def alembic_config(
    *, connection: Connection | None = None, database_uri: str | None = None
) -> Config:
    config = Config()
    for key, value in _pyproject_options().items():
        if key != "script_location":
            config.set_main_option(key, value)
    # the packaged directory wins so installed wheels migrate the same way
    config.set_main_option("script_location", str(MIGRATIONS_PATH))
    if connection is not None:
        config.attributes["connection"] = connection
    if database_uri is not None:
        config.set_main_option("sqlalchemy.url", database_uri)
    return config


def head_revision() -> str | None:
    return ScriptDirectory.from_config(alembic_config()).get_current_head()


def current_revision(engine: Engine) -> str | None:
    """Revision recorded in the database, or ``None`` for an empty database."""

    with engine.connect() as connection:
        context = MigrationContext.configure(connection, opts={"version_table": VERSION_TABLE})
        return context.get_current_revision()


def upgrade_head(*, engine: Engine | None = None, database_uri: str | None = None) -> None:
    """Bring the catalog schema up to the newest revision."""

    if engine is None:
        uri = database_uri or get_database_config().uri
        command.upgrade(alembic_config(database_uri=uri), "head")
        return
    with engine.begin() as connection:
        command.upgrade(alembic_config(connection=connection), "head")
    log.debug("Catalog schema at revision %s", current_revision(engine))
