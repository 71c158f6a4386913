from datetime import datetime, timezone
from logging import getLogger
from typing import Callable

from src.bot.settings import VcThreadSettings

from ..domain.events import (
    LifecycleEvent,
    MemberJoined,
    MemberLeft,
    VoiceChannelAppeared,
    VoiceChannelRemoved,
    VoiceChannelRenamed,
)
from ..domain.raw import RawChannelDelete, RawChannelUpdate, RawVoiceStateUpdate
from .session_store import SessionStore

logger = getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EventNormalizer:
    """
    プラットフォームの生イベントを内部イベントに変換する

    - 追跡していないカスタムVCにメンバーがいる状態で観測されたら VoiceChannelAppeared
    - VCの削除通知のみを VoiceChannelRemoved とする（メンバー0人は解散扱いしない）
    - 退出・名前変更は追跡中のVCに対してのみ転送する
    """

    def __init__(
        self,
        settings: VcThreadSettings,
        store: SessionStore,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.settings = settings
        self.store = store
        self.clock = clock

    def voice_state_update(self, raw: RawVoiceStateUpdate) -> list[LifecycleEvent]:
        before, after = raw.before, raw.after
        if before is not None and after is not None and before.id == after.id:
            # ミュートなどチャンネル移動を伴わない更新
            return []

        now = self.clock()
        events: list[LifecycleEvent] = []

        if before is not None and self.settings.is_custom_vc(before):
            if before.id in self.store:
                events.append(MemberLeft(before.id, raw.member_id, now))
            else:
                logger.debug(f"Dropping leave from untracked channel {before.id}")

        if after is not None and self.settings.is_custom_vc(after):
            if after.id not in self.store:
                if not after.member_ids:
                    logger.debug(f"Channel {after.id} observed without members")
                    return events
                events.append(
                    VoiceChannelAppeared(after.id, after.name, raw.member_id, now)
                )
            events.append(MemberJoined(after.id, raw.member_id, now))

        return events

    def channel_delete(self, raw: RawChannelDelete) -> list[LifecycleEvent]:
        if not self.settings.is_custom_vc(raw.channel):
            return []
        return [VoiceChannelRemoved(raw.channel.id, self.clock())]

    def channel_update(self, raw: RawChannelUpdate) -> list[LifecycleEvent]:
        after = raw.after
        if raw.before.name == after.name or not self.settings.is_custom_vc(after):
            return []
        if after.id not in self.store:
            logger.debug(f"Dropping rename of untracked channel {after.id}")
            return []
        return [VoiceChannelRenamed(after.id, after.name, self.clock())]
