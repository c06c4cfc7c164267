"""Agenda application — main entry point.

Opens the store, applies pending migrations and serves named requests. When
run as a module the UI process talks to it over stdin/stdout, one JSON object
per line: {"channel": "...", "payload": ...} in, the response envelope out.
Logs go to stderr.
"""

import json
import sys
from pathlib import Path
from typing import Optional, TextIO

import structlog
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session

from agenda.application.services.backup_service import is_auto_backup_enabled, write_backup
from agenda.config import Settings, get_settings
from agenda.core.exceptions import MigrationError, RequestValidationException, error_response
from agenda.core.logging import configure_logging
from agenda.infrastructure.database import create_db_engine, create_session_factory
from agenda.infrastructure.migrations.runner import run_migrations
from agenda.interfaces.api.auth import router as auth_router, roles_router
from agenda.interfaces.api.backup import router as backup_router
from agenda.interfaces.api.customers import router as customers_router
from agenda.interfaces.api.services import router as services_router
from agenda.interfaces.api.settings import router as settings_router
from agenda.interfaces.api.shift import router as shift_router
from agenda.interfaces.dispatcher import Dispatcher

logger = structlog.get_logger(__name__)

ROUTERS = (
    auth_router,
    roles_router,
    customers_router,
    services_router,
    shift_router,
    settings_router,
    backup_router,
)


class Application:
    """Owns the engine, the Session and the dispatcher for one process."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.engine = None
        self.dispatcher: Optional[Dispatcher] = None
        self._session_factory = None

    def start(self) -> Dispatcher:
        """Open the store and migrate it. Raises MigrationError on a failed migration."""
        logger.info("Starting Agenda", env=self.settings.ENVIRONMENT)

        database = make_url(self.settings.DATABASE_URL).database
        if database and database != ":memory:":
            Path(database).parent.mkdir(parents=True, exist_ok=True)

        self.engine = create_db_engine(self.settings.DATABASE_URL)
        run_migrations(self.engine)
        self._session_factory = create_session_factory(self.engine)

        self.dispatcher = Dispatcher(
            self._session_factory(),
            ROUTERS,
            settings=self.settings,
            reopen=self._reopen,
        )
        return self.dispatcher

    def _reopen(self) -> Session:
        # a restored file may predate the latest migrations
        self.engine.dispose()
        run_migrations(self.engine)
        logger.info("Database reopened")
        return self._session_factory()

    def shutdown(self) -> None:
        if self.dispatcher is None:
            return
        db = self.dispatcher.db
        try:
            # stored flag wins over the AUTO_BACKUP default
            if is_auto_backup_enabled(db, self.settings.AUTO_BACKUP):
                write_backup(
                    db,
                    Path(self.settings.BACKUP_DIR),
                    label="auto_exit",
                    retention=self.settings.BACKUP_RETENTION,
                )
        finally:
            db.close()
            self.engine.dispose()
            self.dispatcher = None
            logger.info("Agenda stopped")


def serve(dispatcher: Dispatcher, stdin: TextIO, stdout: TextIO) -> None:
    """JSON-lines request loop until stdin closes."""
    for line in stdin:
        line = line.strip()
        if not line:
            continue
        try:
            message = json.loads(line)
        except json.JSONDecodeError:
            logger.warning("Discarding malformed request line")
            response = error_response(RequestValidationException("Solicitud mal formada"), "")
        else:
            if not isinstance(message, dict):
                message = {}
            response = dispatcher.dispatch(str(message.get("channel", "")), message.get("payload"))
            if "id" in message:
                response["id"] = message["id"]
        stdout.write(json.dumps(response, ensure_ascii=False) + "\n")
        stdout.flush()


def main() -> int:
    configure_logging()
    app = Application()
    try:
        dispatcher = app.start()
    except MigrationError as exc:
        logger.error("Startup aborted", error=exc.message, **exc.details)
        return 1

    try:
        serve(dispatcher, sys.stdin, sys.stdout)
    finally:
        app.shutdown()
    return 0


if __name__ == "__main__":
    sys.exit(main())
