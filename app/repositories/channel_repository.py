from __future__ import annotations

from typing import Optional

from app.models import Channel
from app.repositories.base import ChannelRepository, SQLAlchemyRepository


class SQLAlchemyChannelRepository(SQLAlchemyRepository, ChannelRepository):
    def get_by_id(self, channel_id: int) -> Optional[Channel]:
        with self._guard("get channel"):
            return self.db.query(Channel).filter(Channel.id == channel_id).first()
