"""Settings service — flat key/value operational parameters stored as text."""

from typing import Dict, Mapping, Optional

import structlog
from sqlalchemy.orm import Session

from agenda.application.services.auth_service import require_permission
from agenda.domain import permissions
from agenda.domain.models.setting import Setting
from agenda.domain.schemas.auth import SessionContext
from agenda.domain.schemas.settings import SettingValue, coerce_setting_value

logger = structlog.get_logger(__name__)


def get_all(db: Session) -> Dict[str, str]:
    return {s.key: s.value for s in db.query(Setting).all()}


def _upsert(db: Session, key: str, value: str) -> None:
    s = db.get(Setting, key)
    if s is None:
        db.add(Setting(key=key, value=value))
    else:
        s.value = value


def set_value(db: Session, session: Optional[SessionContext], key: str, value: SettingValue) -> Dict[str, str]:
    require_permission(db, session, permissions.CONFIGURACION)
    _upsert(db, key, coerce_setting_value(value))
    db.commit()
    return {key: coerce_setting_value(value)}


def set_many(db: Session, session: Optional[SessionContext], values: Mapping[str, SettingValue]) -> Dict[str, str]:
    """Write every pair in one transaction."""
    require_permission(db, session, permissions.CONFIGURACION)
    try:
        for key, value in values.items():
            _upsert(db, key, coerce_setting_value(value))
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Settings updated", keys=sorted(values))
    return get_all(db)
