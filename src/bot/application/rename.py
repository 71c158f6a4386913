from dataclasses import dataclass
from logging import getLogger

from .platform import PlatformClient
from .retry import RetryPolicy
from .session_store import SessionStore

logger = getLogger(__name__)

MAX_CHANNEL_NAME_LENGTH = 100


class RenamePermissionError(Exception):
    pass


class InvalidChannelNameError(Exception):
    pass


@dataclass(frozen=True)
class RenameRequest:
    thread_id: int
    member_id: int
    new_name: str


class RenameHandler:
    """スレッド内のボタンからVCの名前を変更する"""

    def __init__(
        self,
        store: SessionStore,
        platform: PlatformClient,
        retry_policy: RetryPolicy = RetryPolicy(),
    ):
        self.store = store
        self.platform = platform
        self.retry_policy = retry_policy

    async def authorize(self, thread_id: int, member_id: int) -> int:
        """
        スレッドに紐づく稼働中のVCを返す
        セッションがなければSessionNotFoundError、権限がなければRenamePermissionError
        """
        voice_channel_id = self.store.voice_channel_for_thread(thread_id)
        if not await self.platform.can_manage_channel(voice_channel_id, member_id):
            raise RenamePermissionError(
                f"Member {member_id} cannot manage voice channel {voice_channel_id}"
            )
        return voice_channel_id

    async def rename(self, request: RenameRequest) -> str:
        name = request.new_name.strip()
        if not 0 < len(name) <= MAX_CHANNEL_NAME_LENGTH:
            raise InvalidChannelNameError(f"Invalid channel name: {request.new_name!r}")

        await self.authorize(request.thread_id, request.member_id)
        # 権限確認の間に解散が始まっていないか確認し直す
        voice_channel_id = self.store.voice_channel_for_thread(request.thread_id)

        await self.retry_policy.call(self.platform.rename_channel, voice_channel_id, name)
        logger.info(
            f"Member {request.member_id} renamed voice channel {voice_channel_id} to {name}"
        )
        return name
