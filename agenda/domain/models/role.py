"""Role domain model — maps to the 'roles' table. The id is the access level."""

import json

from sqlalchemy import Column, Integer, String, Text

from agenda.infrastructure.database import Base

ADMIN_LEVEL = 1
WILDCARD = "*"


class Role(Base):
    __tablename__ = "roles"

    id = Column(Integer, primary_key=True)
    label = Column(String, nullable=False)
    permissions = Column(Text, default="[]")  # JSON-encoded list of permission ids

    @property
    def permission_list(self) -> list[str]:
        """Decoded permission ids. Raises ValueError on a malformed column."""
        data = json.loads(self.permissions or "[]")
        if not isinstance(data, list):
            raise ValueError(f"permissions for role {self.id} is not a list")
        return [str(p) for p in data]

    def __repr__(self):
        return f"<Role {self.id} - {self.label}>"
