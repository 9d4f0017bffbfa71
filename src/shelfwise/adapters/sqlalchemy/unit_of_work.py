"""Session handling for the catalog database.

The adapter is process-wide: :func:`startup` binds one engine, migrates it to
the newest schema and every :class:`SqlAlchemyUnitOfWork` opened afterwards
draws a fresh session from it. Each unit of work is one transaction; leaving
the ``with`` block on an exception rolls back whatever was not committed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from shelfwise.adapters.sqlalchemy.mappings import start_mappers
from shelfwise.adapters.sqlalchemy.migrations import upgrade_head
from shelfwise.adapters.sqlalchemy.repositories import (
    SqlAlchemyAvailabilityRepository,
    SqlAlchemyBrandPageRepository,
    SqlAlchemyCityPageRepository,
    SqlAlchemyContentEditRepository,
    SqlAlchemyContributorRepository,
    SqlAlchemyProductRepository,
    SqlAlchemyReviewRepository,
    SqlAlchemyStoreRepository,
    SqlAlchemyUserProductRepository,
)
from shelfwise.config import get_database_config
from shelfwise.domain.ports.unit_of_work import CatalogRepositories

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class StartupError(RuntimeError):
    """The adapter or a unit of work was used in the wrong lifecycle state."""


@dataclass(slots=True)
class _AdapterState:
    engine: Engine | None = None
    sessions: sessionmaker[Session] | None = None

    def bind(self, engine: Engine | None) -> None:
        self.engine = engine
        self.sessions = (
            None if engine is None else sessionmaker(bind=engine, expire_on_commit=False)
        )

    def new_session(self) -> Session:
        if self.sessions is None:
            raise StartupError(
                "Catalog database not started; call "
                "shelfwise.adapters.sqlalchemy.unit_of_work.startup() first"
            )
        return self.sessions()


_STATE = _AdapterState()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> None:
    """Bind the adapter to ``engine`` (or a new one) and migrate its schema.

    Without ``engine`` or ``database_uri`` the database comes from
    :func:`shelfwise.config.get_database_config`. A second call raises
    :class:`StartupError` unless ``force`` is set.
    """

    if _STATE.engine is not None and not force:
        raise StartupError("Catalog database already started; pass force=True to rebind")

    if engine is None:
        database = get_database_config()
        engine = create_engine(database_uri or database.uri, echo=database.echo)
    start_mappers()
    upgrade_head(engine=engine)
    _STATE.bind(engine)
    log.info("Catalog database ready at %s", engine.url)


def configured_engine() -> Engine | None:
    return _STATE.engine


def is_started() -> bool:
    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the bound engine; safe to call when not started."""

    if _STATE.engine is not None:
        _STATE.engine.dispose()
        log.debug("Catalog database engine disposed")
    _STATE.bind(None)


class SqlAlchemyUnitOfWork:
    """One catalog transaction with a repository per aggregate."""

    def __init__(self) -> None:
        if not is_started():
            raise StartupError("Catalog database not started")
        self._session: Session | None = None
        self._repositories: CatalogRepositories | None = None

    def __enter__(self) -> SqlAlchemyUnitOfWork:
        if self._session is not None:
            raise StartupError("Unit of work already entered")
        session = _STATE.new_session()
        self._session = session
        self._repositories = CatalogRepositories(
            contributors=SqlAlchemyContributorRepository(session),
            products=SqlAlchemyProductRepository(session),
            user_products=SqlAlchemyUserProductRepository(session),
            stores=SqlAlchemyStoreRepository(session),
            availability=SqlAlchemyAvailabilityRepository(session),
            reviews=SqlAlchemyReviewRepository(session),
            city_pages=SqlAlchemyCityPageRepository(session),
            brand_pages=SqlAlchemyBrandPageRepository(session),
            content_edits=SqlAlchemyContentEditRepository(session),
        )
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        session = self.session
        if exc_type is not None:
            session.rollback()
        session.close()
        self._session = None
        self._repositories = None
        return False

    @property
    def session(self) -> Session:
        if self._session is None:
            raise StartupError("Unit of work used outside its with block")
        return self._session

    @property
    def repositories(self) -> CatalogRepositories:
        if self._repositories is None:
            raise StartupError("Unit of work used outside its with block")
        return self._repositories

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


if TYPE_CHECKING:
    from shelfwise.domain.ports.unit_of_work import CatalogUnitOfWork

    _uow_check: CatalogUnitOfWork = SqlAlchemyUnitOfWork()
