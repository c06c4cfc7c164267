"""Migration ledger model — one row per applied schema migration."""

from sqlalchemy import Column, Integer, String

from agenda.infrastructure.database import Base


class MigrationRecord(Base):
    __tablename__ = "schema_migrations"

    id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String, nullable=False)
    applied_at = Column(String, nullable=False)

    def __repr__(self):
        return f"<MigrationRecord {self.id} {self.name}>"
