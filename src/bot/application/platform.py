from abc import ABC, abstractmethod


class PlatformError(Exception):
    """リトライしても回復しないプラットフォームのエラー"""


class TransientPlatformError(PlatformError):
    """ネットワークやレート制限など、リトライで回復し得るエラー"""


class PlatformClient(ABC):
    @abstractmethod
    async def create_thread(self, parent_channel_id: int, name: str) -> int: ...

    @abstractmethod
    async def send_message(self, channel_id: int, content: str) -> None: ...

    @abstractmethod
    async def send_rename_control(self, thread_id: int, content: str) -> None:
        """チャンネル名変更ボタン付きのメッセージを送信する"""

    @abstractmethod
    async def archive_thread(self, thread_id: int) -> None: ...

    @abstractmethod
    async def rename_channel(self, channel_id: int, new_name: str) -> None: ...

    @abstractmethod
    async def can_manage_channel(self, channel_id: int, member_id: int) -> bool: ...
