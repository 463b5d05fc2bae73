import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Generator, Mapping, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import URL, Connection, Engine, make_url

from app.models import Base

from .config import DatabaseSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatementResult:
    rowcount: int
    lastrowid: Optional[int]


class ConnectionPool:
    """Bounded pool of database connections.

    Callers beyond ``connection_limit`` wait for a connection to be returned
    instead of being rejected.
    """

    def __init__(self, url: str | URL, *, connection_limit: int = 10, echo: bool = False):
        url = make_url(url)
        connect_args = {"check_same_thread": False} if url.get_backend_name() == "sqlite" else {}
        self.connection_limit = connection_limit
        self.engine: Engine = create_engine(
            url,
            pool_size=connection_limit,
            max_overflow=0,
            pool_pre_ping=True,
            connect_args=connect_args,
            echo=echo,
        )

    @classmethod
    def from_settings(cls, settings: DatabaseSettings) -> "ConnectionPool":
        return cls(settings.sqlalchemy_url(), connection_limit=settings.connection_limit)

    @contextmanager
    def connection(self) -> Generator[Connection, None, None]:
        """Check out a connection for one unit of work and always give it back."""

        with self.engine.connect() as conn:
            try:
                yield conn
                conn.commit()
            except Exception:
                conn.rollback()
                raise

    def query(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> list[dict[str, Any]]:
        with self.connection() as conn:
            result = conn.execute(text(sql), dict(params or {}))
            return [dict(row) for row in result.mappings()]

    def execute(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> StatementResult:
        with self.connection() as conn:
            result = conn.execute(text(sql), dict(params or {}))
            return StatementResult(rowcount=result.rowcount, lastrowid=result.lastrowid)

    def health_check(self) -> bool:
        rows = self.query("SELECT 1 AS ok")
        return bool(rows) and rows[0].get("ok") == 1

    def create_all(self) -> None:
        Base.metadata.create_all(bind=self.engine)
        logger.info("Database schema is up to date")

    def dispose(self) -> None:
        self.engine.dispose()
