"""Apply the ledger schema migrations through Alembic's command API.

Connection details, including Secrets Manager credentials, are resolved by
``alembic/env.py`` through ``LedgerDatabase``, so this module only locates
the Alembic scripts and captures what Alembic reports.
"""

import io
import logging
import os

from alembic.config import Config

from alembic import command

logger = logging.getLogger(__name__)

ALEMBIC_INI = os.environ.get("ALEMBIC_INI", "/var/task/alembic.ini")
ALEMBIC_SCRIPTS = os.environ.get("ALEMBIC_SCRIPTS", "/var/task/alembic")


def _alembic_config() -> Config:
    cfg = Config(ALEMBIC_INI)
    cfg.set_main_option("script_location", ALEMBIC_SCRIPTS)
    return cfg


def run_migrations(revision: str = "head") -> dict[str, str]:
    """Upgrade the ledger tables to ``revision`` and return Alembic's log output."""
    captured = io.StringIO()
    capture_handler = logging.StreamHandler(captured)
    alembic_logger = logging.getLogger("alembic")
    alembic_logger.addHandler(capture_handler)

    logger.info("Upgrading ledger schema to %s", revision)
    try:
        command.upgrade(_alembic_config(), revision)
    except Exception:
        logger.exception("Ledger schema upgrade to %s failed", revision)
        raise
    finally:
        alembic_logger.removeHandler(capture_handler)

    output = captured.getvalue()
    logger.info("Ledger schema at %s", revision)
    return {"status": "success", "revision": revision, "output": output}
