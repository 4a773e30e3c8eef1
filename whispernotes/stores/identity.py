"""
Identity store: the signed-in user and the session lifecycle.

Every session-changing call tries the auth service first. When the service
is unreachable or says no, the store synthesizes a local user instead and
the call still succeeds, so the client stays usable with no backend at all.
The branch taken is kept in ``provenance``; callers only see the User.
"""

import time
from typing import Optional
from uuid import NAMESPACE_URL, uuid4, uuid5

from pydantic import ValidationError

from whispernotes.config import settings
from whispernotes.database.db import LocalStorage
from whispernotes.logging import get_logger
from whispernotes.models import (
    AuthResult,
    IdentitySnapshot,
    ProfileUpdate,
    Provenance,
    User,
    utcnow,
)
from whispernotes.services.auth_client import AuthClient
from whispernotes.stores.base import Store

logger = get_logger('stores.identity')

FALLBACK_ID_PREFIX = "local-"


def fallback_sign_in_user(email: str) -> User:
    """Local user for a sign-in the server could not confirm. Same email, same id."""
    user_id = uuid5(NAMESPACE_URL, f"mailto:{email.strip().lower()}")
    return User(
        id=f"{FALLBACK_ID_PREFIX}{user_id}",
        email=email,
        name=email.split("@")[0],
        created_at=utcnow(),
    )


def fallback_sign_up_user(name: str, email: str) -> User:
    """Local user for a sign-up the server could not confirm. Always a fresh id."""
    return User(
        id=f"{FALLBACK_ID_PREFIX}{int(time.time() * 1000)}-{uuid4().hex[:8]}",
        email=email,
        name=name,
        created_at=utcnow(),
    )


class IdentityStore(Store[IdentitySnapshot]):
    """Store for the authenticated user."""

    def __init__(
        self,
        storage: LocalStorage,
        auth: AuthClient,
        storage_key: Optional[str] = None,
    ):
        super().__init__(storage, storage_key or settings.USER_STORAGE_KEY)
        self.auth = auth
        self._user: Optional[User] = None
        self._provenance: Optional[Provenance] = None

    @property
    def user(self) -> Optional[User]:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    @property
    def provenance(self) -> Optional[Provenance]:
        """Which branch produced the current user; None when signed out or restored from storage."""
        return self._provenance

    def _build_snapshot(self) -> IdentitySnapshot:
        return IdentitySnapshot(user=self._user, is_loading=self.is_loading)

    def _serialize(self):
        return self._user.to_json_dict() if self._user else None

    def _checkpoint(self) -> tuple[Optional[User], Optional[Provenance]]:
        return self._user, self._provenance

    def _rollback(self, checkpoint: tuple[Optional[User], Optional[Provenance]]) -> None:
        self._user, self._provenance = checkpoint

    def _restore(self, stored) -> None:
        if stored is None:
            return
        try:
            self._user = User.model_validate(stored)
        except ValidationError as e:
            logger.warning(f"Failed to load user, starting signed out: {e}")
            self._user = None

    async def _set_session(self, user: Optional[User], provenance: Optional[Provenance]) -> None:
        async with self._lock:
            checkpoint = self._checkpoint()
            self._user = user
            self._provenance = provenance
            await self._commit(checkpoint)

    def _accept(self, result: AuthResult, action: str) -> bool:
        if result.success and result.user is not None:
            return True
        logger.warning(f"Backend not available for {action}, using local state: {result.error}")
        return False

    # ── Operations ──

    async def sign_in(self, email: str, password: str) -> User:
        self._begin_loading()
        try:
            result = await self.auth.login(email, password)
            if self._accept(result, "sign in"):
                user, provenance = result.user, Provenance.REMOTE
            else:
                user, provenance = fallback_sign_in_user(email), Provenance.LOCAL_FALLBACK
            await self._set_session(user, provenance)
            logger.info(f"Signed in {user.email} ({provenance.value})")
            return user
        finally:
            self._end_loading()

    async def sign_up(self, name: str, email: str, password: str) -> User:
        self._begin_loading()
        try:
            result = await self.auth.signup(name, email, password)
            if self._accept(result, "sign up"):
                user, provenance = result.user, Provenance.REMOTE
            else:
                user, provenance = fallback_sign_up_user(name, email), Provenance.LOCAL_FALLBACK
            await self._set_session(user, provenance)
            logger.info(f"Signed up {user.email} ({provenance.value})")
            return user
        finally:
            self._end_loading()

    async def sign_out(self) -> None:
        self.auth.forget_token()
        await self._set_session(None, None)
        logger.info("Signed out")

    async def update_profile(self, changes: ProfileUpdate | dict) -> Optional[User]:
        """
        Update profile fields of the signed-in user.

        Concurrent calls are not queued: whichever finishes last wins. A call
        that finishes after sign-out is discarded.

        :param changes: Fields to change; omitted fields keep their values
        :return: The updated user, or None when nobody is signed in
        """
        if self._user is None:
            return None
        if not isinstance(changes, ProfileUpdate):
            changes = ProfileUpdate.model_validate(changes)

        self._begin_loading()
        try:
            result = await self.auth.update_profile(changes)
            async with self._lock:
                current = self._user
                if current is None:
                    logger.info("Signed out while profile update was in flight; discarding result")
                    return None
                if self._accept(result, "profile update"):
                    updated, provenance = result.user, Provenance.REMOTE
                else:
                    merged = {**current.to_json_dict(), **changes.changes()}
                    updated, provenance = User.model_validate(merged), Provenance.LOCAL_FALLBACK
                checkpoint = self._checkpoint()
                self._user = updated
                self._provenance = provenance
                await self._commit(checkpoint)
            return updated
        finally:
            self._end_loading()
