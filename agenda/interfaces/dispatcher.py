"""
Request dispatcher — routes named requests ("module:method") to handlers.

Handlers are registered on a Router per module, the same way endpoints are
grouped under an APIRouter prefix. The dispatcher validates the payload
against the handler's pydantic model, runs it with the current session and
wraps the outcome in the response envelope. One request runs at a time.
"""

import threading
import time
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Type

import structlog
from pydantic import BaseModel, RootModel, ValidationError
from sqlalchemy.orm import Session

from agenda.config import Settings, get_settings
from agenda.core.exceptions import (
    AppError,
    EntityNotFoundException,
    RequestValidationException,
    error_response,
)
from agenda.domain.schemas.auth import SessionContext

logger = structlog.get_logger(__name__)

Handler = Callable[["Dispatcher", Any], Any]


@dataclass
class Route:
    channel: str
    endpoint: Handler
    payload: Optional[Type[BaseModel]] = None

    def parse(self, raw: Any) -> Any:
        """Validate the raw payload; a bare scalar fills a single-field model."""
        if self.payload is None:
            return None
        if raw is None:
            raw = {}
        elif not isinstance(raw, dict) and not issubclass(self.payload, RootModel):
            fields = list(self.payload.model_fields)
            if len(fields) == 1:
                raw = {fields[0]: raw}
        try:
            return self.payload.model_validate(raw)
        except ValidationError as exc:
            raise RequestValidationException.from_pydantic(exc) from exc


class Router:
    """Group of handlers sharing a channel prefix."""

    def __init__(self, prefix: str):
        self.prefix = prefix
        self.routes: List[Route] = []

    def handle(self, name: str, payload: Optional[Type[BaseModel]] = None):
        def decorator(func: Handler) -> Handler:
            self.routes.append(Route(f"{self.prefix}:{name}", func, payload))
            return func
        return decorator


def to_jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, dict):
        return {k: to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    return value


class Dispatcher:
    """Owns the open Session and the login session of the running application."""

    def __init__(
        self,
        db: Session,
        routers: Iterable[Router] = (),
        settings: Optional[Settings] = None,
        reopen: Optional[Callable[[], Session]] = None,
    ):
        self.db = db
        self.settings = settings or get_settings()
        self.session: Optional[SessionContext] = None
        self._reopen = reopen
        self._routes: Dict[str, Route] = {}
        self._lock = threading.Lock()
        for router in routers:
            self.include_router(router)

    def include_router(self, router: Router) -> None:
        for route in router.routes:
            if route.channel in self._routes:
                raise ValueError(f"Channel registered twice: {route.channel}")
            self._routes[route.channel] = route

    @property
    def channels(self) -> List[str]:
        return sorted(self._routes)

    def reopen(self) -> None:
        """Replace the Session after the database file was swapped underneath it."""
        if self._reopen is None:
            raise RuntimeError("Dispatcher has no reopen callback")
        self.db = self._reopen()
        self.session = None

    def dispatch(self, channel: str, payload: Any = None) -> Dict[str, Any]:
        with self._lock, structlog.contextvars.bound_contextvars(
            request_id=uuid.uuid4().hex[:12], channel=channel
        ):
            start_time = time.perf_counter()
            logger.debug("Request started", user_id=self.session.user_id if self.session else None)

            try:
                route = self._routes.get(channel)
                if route is None:
                    raise EntityNotFoundException(f"Canal desconocido: {channel}", {"channel": channel})
                data = route.endpoint(self, route.parse(payload))
            except AppError as exc:
                self.db.rollback()
                logger.info(
                    "Request rejected",
                    code=exc.__class__.__name__,
                    message=exc.message,
                    process_time_ms=round((time.perf_counter() - start_time) * 1000, 2),
                )
                return error_response(exc, channel)
            except Exception as exc:
                self.db.rollback()
                logger.exception(
                    "Request failed",
                    process_time_ms=round((time.perf_counter() - start_time) * 1000, 2),
                )
                return error_response(exc, channel)

            logger.info(
                "Request completed",
                process_time_ms=round((time.perf_counter() - start_time) * 1000, 2),
            )
            return {"success": True, "data": to_jsonable(data)}
