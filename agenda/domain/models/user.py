"""User domain model — maps to the 'usuarios' table."""

from sqlalchemy import Column, Integer, String, CheckConstraint

from agenda.core.clock import local_timestamp
from agenda.infrastructure.database import Base


class User(Base):
    __tablename__ = "usuarios"
    __table_args__ = (CheckConstraint("level >= 1", name="ck_usuarios_level"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    nombre = Column(String, nullable=False)
    apellido = Column(String, nullable=False)
    usuario = Column(String, unique=True, nullable=False)
    password = Column(String, nullable=False)  # passlib hash, never plaintext
    level = Column(Integer, nullable=False)  # 1 = admin, 2..N = role-bound
    last_login = Column(String, nullable=True)
    created_at = Column(String, default=local_timestamp)

    def __repr__(self):
        return f"<User {self.usuario} (level {self.level})>"
