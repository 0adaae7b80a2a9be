from collections.abc import Callable

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from autotranslate.config import settings
import logging

logger = logging.getLogger(__name__)

AFTER_COMMIT_CALLBACKS = "autotranslate.after_commit"


class TranslatingSession(Session):
    """
    Session that runs registered callbacks once ``commit()`` has returned.

    Callbacks live in ``session.info`` until the next successful commit.
    A rollback or close discards them, so work scheduled by a mutation that
    never commits is never executed. Callbacks registered while the queue
    is being drained run in the same drain. A callback that raises is
    logged and the remaining callbacks still run.
    """

    def commit(self) -> None:
        super().commit()
        self._run_after_commit_callbacks()

    def rollback(self) -> None:
        self.info.pop(AFTER_COMMIT_CALLBACKS, None)
        super().rollback()

    def close(self) -> None:
        self.info.pop(AFTER_COMMIT_CALLBACKS, None)
        super().close()

    def after_commit(self, callback: Callable[[], None]) -> None:
        self.info.setdefault(AFTER_COMMIT_CALLBACKS, []).append(callback)

    def _run_after_commit_callbacks(self) -> None:
        while True:
            callbacks = self.info.pop(AFTER_COMMIT_CALLBACKS, None)
            if not callbacks:
                break
            for callback in callbacks:
                try:
                    callback()
                except Exception:
                    logger.exception("After-commit callback %r failed", callback)


def _create_engine(url: str):
    if url.startswith("sqlite"):
        # One shared connection so an in-memory database survives across sessions
        return create_engine(
            url,
            echo=settings.debug,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    if settings.environment == "production":
        return create_engine(
            url,
            pool_size=20,
            max_overflow=50,
            pool_timeout=60,
            pool_recycle=1800,
        )
    return create_engine(
        url,
        echo=settings.debug,
        pool_size=10,
        max_overflow=20,
        pool_timeout=30,
    )


engine = _create_engine(settings.database_url)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    class_=TranslatingSession,
)

Base = declarative_base()


def get_db():
    with SessionLocal() as db:
        try:
            yield db
        except Exception as e:
            logger.error("Database session error: %s", e)
            db.rollback()
            raise
