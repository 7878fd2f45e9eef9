"""Relational store connection management: engine, sessions, schema."""

import json
import logging
from functools import lru_cache
from typing import Any

import boto3
from sqlalchemy import Engine, create_engine, event, text
from sqlalchemy.engine import URL, make_url
from sqlalchemy.orm import Session, sessionmaker

from core.config import Config, get_config
from core.db.schemas.base import Base
from core.errors import AngkotError

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_conn: Any, _record: Any) -> None:
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class LedgerDatabase:
    def __init__(self, config: Config) -> None:
        self._config = config
        self._engine: Engine | None = None
        self._session_factory: sessionmaker[Session] | None = None
        self._secret_cache: dict[str, str] | None = None

    def _get_credentials(self) -> dict[str, str]:
        if self._config.db_secret_arn:
            if self._secret_cache is None:
                client = boto3.client("secretsmanager", region_name=self._config.aws_region)
                secret = client.get_secret_value(SecretId=self._config.db_secret_arn)
                self._secret_cache = json.loads(secret["SecretString"])
            return self._secret_cache
        return {
            "host": self._config.db_host,
            "port": str(self._config.db_port),
            "dbname": self._config.db_name,
            "user": self._config.db_user,
            "password": self._config.db_password,
        }

    def url(self) -> URL:
        if self._config.database_url:
            return make_url(self._config.database_url)
        creds = self._get_credentials()
        return URL.create(
            "postgresql+psycopg",
            username=creds.get("username", creds.get("user", self._config.db_user)),
            password=creds.get("password", self._config.db_password),
            host=creds.get("host", self._config.db_host),
            port=int(creds.get("port", self._config.db_port)),
            database=creds.get("dbname", self._config.db_name),
        )

    def connect(self) -> None:
        url = self.url()
        if url.get_backend_name() == "sqlite":
            # The busy timeout bounds how long a writer waits for the database lock.
            self._engine = create_engine(
                url,
                connect_args={
                    "check_same_thread": False,
                    "timeout": self._config.lock_timeout_ms / 1000,
                },
            )
            event.listen(self._engine, "connect", _enable_sqlite_foreign_keys)
        else:
            self._engine = create_engine(url, pool_pre_ping=True)
        self._session_factory = sessionmaker(bind=self._engine, expire_on_commit=False)
        logger.info("Connected to %s database", url.get_backend_name())

    def disconnect(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
        self._engine = None
        self._session_factory = None

    def _require_engine(self) -> Engine:
        """Return the active engine or raise if not connected."""
        if self._engine is None:
            raise AngkotError("LedgerDatabase is not connected. Call connect() first.")
        return self._engine

    def session(self) -> Session:
        self._require_engine()
        assert self._session_factory is not None
        return self._session_factory()

    def create_schema(self) -> None:
        """Create all tables directly: for SQLite and local development."""
        Base.metadata.create_all(self._require_engine())

    def health_check(self) -> bool:
        try:
            engine = self._require_engine()
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception:
            return False

    def __enter__(self) -> "LedgerDatabase":
        self.connect()
        return self

    def __exit__(self, *args: object) -> None:
        self.disconnect()


@lru_cache(maxsize=1)
def get_database() -> LedgerDatabase:
    """Connected database reused across warm Lambda invocations."""
    database = LedgerDatabase(get_config())
    database.connect()
    return database
