"""SQLAlchemy engine and session setup."""

from __future__ import annotations

import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


class Database:
    """Data-access handle owning one engine and its session factory.

    Built once by the process entry point and passed to every component
    that needs the store.
    """

    def __init__(self, url: str, echo: bool = False) -> None:
        self.url = url
        kwargs: dict = {"echo": echo}
        if url.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False}  # SQLite needs this for multi-thread
            if url in ("sqlite://", "sqlite:///:memory:"):
                # One shared connection, otherwise every session sees an empty database
                kwargs["poolclass"] = StaticPool
        self.engine = create_engine(url, **kwargs)
        self._session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)

    def session(self) -> Session:
        """Create a new database session."""
        return self._session_factory()

    def init_db(self) -> None:
        """Create all tables. Import models first so they register with Base."""
        # Import all models to ensure they are registered
        import litepages.models.account  # noqa: F401
        import litepages.models.availability  # noqa: F401
        import litepages.models.lite  # noqa: F401
        import litepages.models.offer  # noqa: F401
        import litepages.models.property  # noqa: F401
        import litepages.models.review  # noqa: F401
        import litepages.models.tax  # noqa: F401
        import litepages.models.unit  # noqa: F401

        Base.metadata.create_all(bind=self.engine)
        logger.info("Database ready at %s", self.engine.url.render_as_string(hide_password=True))

    def dispose(self) -> None:
        self.engine.dispose()
