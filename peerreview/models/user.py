"""User data model."""

from dataclasses import dataclass
from typing import Literal, Optional

USER_ROLES = ("researcher", "reviewer", "admin")


@dataclass
class User:
    """A registered platform user."""

    email: str
    name: str
    role: Literal["researcher", "reviewer", "admin"] = "researcher"
    institution: str = ""

    # Database fields (set after persistence)
    id: Optional[int] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "role": self.role,
            "institution": self.institution,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
