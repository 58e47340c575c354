"""Identity lookup and registration."""

import logging

from peerreview.database.repository import UserRepository
from peerreview.errors import ConflictError, NotFoundError
from peerreview.models.user import User
from peerreview.validation import validate_user_fields

logger = logging.getLogger(__name__)


class UserService:
    """Registers users and resolves user ids to identities."""

    def __init__(self, users: UserRepository):
        self.users = users

    def register_user(
        self,
        email: str,
        name: str,
        role: str = "researcher",
        institution: str = "",
    ) -> User:
        """Register a new user.

        Raises:
            ValidationError: On malformed email, name or role
            ConflictError: If the email is already registered
        """
        email = (email or "").strip().lower()
        validate_user_fields(email, name, role)
        if self.users.find_by_email(email) is not None:
            raise ConflictError(f"Email {email} is already registered")
        user = self.users.create(
            User(email=email, name=name.strip(), role=role, institution=(institution or "").strip())
        )
        logger.info("Registered user %s (%s)", user.id, user.role)
        return user

    def get_user(self, user_id: int) -> User:
        user = self.users.find_by_id(user_id)
        if user is None:
            raise NotFoundError.for_resource("User", user_id)
        return user
