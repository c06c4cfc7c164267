"""Setting domain model — flat key/value operational parameters."""

from sqlalchemy import Column, String

from agenda.infrastructure.database import Base


class Setting(Base):
    __tablename__ = "settings"

    key = Column(String, primary_key=True)
    value = Column(String, nullable=False)

# Seeded on first run
DEFAULT_SETTINGS = {
    # Operational
    "shift_opening": "08:00",
    "shift_closing": "20:00",
    "shift_interval": "30",
    # Calendar / heat-map
    "calendar_start_day": "monday",
    "threshold_low": "3",
    "threshold_medium": "7",
    # Status visibility
    "show_completed": "false",
    "show_cancelled": "false",
    "show_absent": "false",
}
