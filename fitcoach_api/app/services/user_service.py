"""
Business logic for user accounts.

Accounts are not owner scoped: the service looks them up by id or by
email directly in its repository.  Passwords are stored as PBKDF2
hashes (see ``core.security``) and never leave this module.
"""

import logging
from typing import Any, Dict, Optional

from ..core.db import Repository
from ..core.errors import AuthenticationFailed, ConflictError, NotFoundError
from ..core.security import hash_password, verify_password
from ..schemas.user import RegisterRequest, UserAccount, UserRole
from .coach_service import CoachService
from .resource_service import Clock, utcnow

logger = logging.getLogger(__name__)


class UserService:
    """Сервис учётных записей: вход, регистрация и профиль пользователя."""

    def __init__(self, repository: Repository, coaches: CoachService, clock: Clock = utcnow) -> None:
        self.repository = repository
        self.coaches = coaches
        self.clock = clock

    def _find_by_email(self, email: str) -> Optional[UserAccount]:
        return next((u for u in self.repository.list() if u.email == email), None)

    async def authenticate(self, email: str, password: str) -> UserAccount:
        """Check credentials and record the login time.

        Unknown emails, wrong passwords and deactivated accounts all
        produce the same ``AuthenticationFailed`` error.
        """
        with self.repository.lock:
            user = self._find_by_email(email)
            if user is None or not user.is_active or not verify_password(password, user.password_hash):
                logger.info("Failed login attempt for %s", email)
                raise AuthenticationFailed()
            user = user.model_copy(update={"last_login": self.clock()})
            self.repository.put(user)
        logger.info("User %s logged in", user.id)
        return user

    async def register(self, data: RegisterRequest) -> UserAccount:
        """Create an account; coaches also get a coach profile.

        The coach profile is created before the account is stored, so a
        profile that fails validation leaves no half registered user.
        """
        with self.repository.lock:
            if self._find_by_email(data.email) is not None:
                raise ConflictError("Email is already registered", error="User already exists")
            user = UserAccount(
                id=self.repository.next_id(),
                email=data.email,
                password_hash=hash_password(data.password),
                role=data.role,
                name=data.name,
                created_at=self.clock(),
                profile=dict(data.profile),
            )
            if user.role == UserRole.COACH:
                self.coaches.create_profile(user.id, user.name, user.email, user.profile)
            self.repository.put(user)
        logger.info("Registered %s account %s", user.role.value, user.id)
        return user

    def get_user(self, user_id: str) -> UserAccount:
        user = self.repository.get(user_id)
        if user is None or not user.is_active:
            raise NotFoundError("User account no longer exists", error="User not found")
        return user

    async def update_profile(
        self, user_id: str, name: Optional[str] = None, profile: Optional[Dict[str, Any]] = None
    ) -> UserAccount:
        """Rename the user and/or merge ``profile`` into the stored profile."""
        with self.repository.lock:
            user = self.get_user(user_id)
            changes: Dict[str, Any] = {}
            if name:
                changes["name"] = name
            if profile:
                changes["profile"] = {**user.profile, **profile}
            if changes:
                user = user.model_copy(update=changes)
                self.repository.put(user)
        return user
