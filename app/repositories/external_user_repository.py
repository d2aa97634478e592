"""External user persistence, keyed by (channel_id, platform_user_id)."""

from __future__ import annotations

from typing import Optional, Tuple

from sqlalchemy.exc import IntegrityError

from app.exceptions import PersistenceError
from app.models import ExternalUser
from app.models.mixins import utcnow
from app.repositories.base import ExternalUserRepository, SQLAlchemyRepository
from app.schemas.external_user import ExternalUserCreate, ExternalUserUpdate


class SQLAlchemyExternalUserRepository(SQLAlchemyRepository, ExternalUserRepository):
    def create(self, data: ExternalUserCreate) -> ExternalUser:
        values = data.model_dump(exclude={"metadata"})
        now = utcnow()
        user = ExternalUser(
            **values, extra=data.metadata, first_seen_at=now, last_seen_at=now
        )
        return self._save(user, "create external user")

    def get_by_id(self, user_id: int) -> Optional[ExternalUser]:
        with self._guard("get external user"):
            return (
                self.db.query(ExternalUser).filter(ExternalUser.id == user_id).first()
            )

    def get_by_channel_and_platform_id(
        self, channel_id: int, platform_user_id: str
    ) -> Optional[ExternalUser]:
        with self._guard("get external user"):
            return (
                self.db.query(ExternalUser)
                .filter(
                    ExternalUser.channel_id == channel_id,
                    ExternalUser.platform_user_id == platform_user_id,
                )
                .first()
            )

    def find_or_create(self, data: ExternalUserCreate) -> Tuple[ExternalUser, bool]:
        user = self.get_by_channel_and_platform_id(
            data.channel_id, data.platform_user_id
        )
        if user is not None:
            self._touch(user)
            return user, False

        try:
            return self.create(data), True
        except PersistenceError as e:
            # Lost a race on the unique key: the other writer's row wins
            if not isinstance(e.__cause__, IntegrityError):
                raise
        user = self.get_by_channel_and_platform_id(
            data.channel_id, data.platform_user_id
        )
        if user is None:
            raise PersistenceError(
                f"external user {data.platform_user_id!r} vanished after conflict"
            )
        self._touch(user)
        return user, False

    def update(
        self, user_id: int, data: ExternalUserUpdate
    ) -> Optional[ExternalUser]:
        user = self.get_by_id(user_id)
        if user is None:
            return None
        update_data = data.model_dump(exclude_unset=True)
        if "metadata" in update_data:
            update_data["extra"] = update_data.pop("metadata")
        for key, value in update_data.items():
            setattr(user, key, value)
        return self._save(user, "update external user")

    def touch_last_seen(self, user_id: int) -> None:
        with self._guard("touch external user"):
            self.db.query(ExternalUser).filter(ExternalUser.id == user_id).update(
                {ExternalUser.last_seen_at: utcnow()}, synchronize_session="evaluate"
            )
            self.db.commit()

    def _touch(self, user: ExternalUser) -> None:
        user.last_seen_at = utcnow()
        self._save(user, "touch external user")
