from logging import getLogger

from src.ui import messages

from ..domain.events import (
    LifecycleEvent,
    MemberJoined,
    MemberLeft,
    VoiceChannelAppeared,
    VoiceChannelRemoved,
    VoiceChannelRenamed,
)
from ..domain.session import SessionSummary
from .platform import PlatformClient, PlatformError
from .retry import RetryPolicy
from .session_store import (
    SessionAlreadyArchivingError,
    SessionAlreadyExistsError,
    SessionNotFoundError,
    SessionStore,
)

logger = getLogger(__name__)


class LifecycleCoordinator:
    """
    VCごとの状態機械 Absent -> Active -> Archiving -> Absent

    同じVCのイベントは呼び出し側（SessionEventDispatcher）で直列化されている前提。
    プラットフォームの失敗はここで回復し、例外を外に漏らさない。
    """

    def __init__(
        self,
        store: SessionStore,
        platform: PlatformClient,
        thread_channel_id: int,
        retry_policy: RetryPolicy = RetryPolicy(),
    ):
        self.store = store
        self.platform = platform
        self.thread_channel_id = thread_channel_id
        self.retry_policy = retry_policy

    async def handle(self, event: LifecycleEvent) -> None:
        if isinstance(event, VoiceChannelAppeared):
            await self.on_appeared(event)
        elif isinstance(event, VoiceChannelRemoved):
            await self.on_removed(event)
        elif isinstance(event, VoiceChannelRenamed):
            await self.on_renamed(event)
        elif isinstance(event, MemberJoined):
            self.on_member_joined(event)
        elif isinstance(event, MemberLeft):
            self.on_member_left(event)
        else:
            raise TypeError(f"Unknown lifecycle event: {event!r}")

    async def on_appeared(self, event: VoiceChannelAppeared) -> None:
        vc_id = event.voice_channel_id
        if vc_id in self.store:
            logger.debug(f"Duplicate appearance of voice channel {vc_id}")
            return

        name = event.name or messages.UNKNOWN_CHANNEL_NAME
        try:
            thread_id = await self.retry_policy.call(
                self.platform.create_thread, self.thread_channel_id, name
            )
        except PlatformError:
            logger.exception(f"Failed to create thread for voice channel {vc_id}")
            return

        try:
            self.store.create(vc_id, thread_id, event.occurred_at, name=name)
        except SessionAlreadyExistsError:
            logger.warning(
                f"Session for voice channel {vc_id} appeared concurrently, thread {thread_id} is unused"
            )
            return

        logger.info(f"Linked voice channel {vc_id} to thread {thread_id} ({name})")
        await self._post_creation_notices(event, thread_id, name)

    def on_member_joined(self, event: MemberJoined) -> None:
        try:
            first = self.store.record_join(
                event.voice_channel_id, event.member_id, event.occurred_at
            )
        except SessionNotFoundError:
            logger.debug(
                f"Dropping join of {event.member_id} to untracked channel {event.voice_channel_id}"
            )
            return
        if first:
            logger.info(
                f"Member {event.member_id} joined voice channel {event.voice_channel_id}"
            )

    def on_member_left(self, event: MemberLeft) -> None:
        try:
            self.store.record_leave(event.voice_channel_id, event.member_id)
        except SessionNotFoundError:
            logger.debug(
                f"Dropping leave of {event.member_id} from untracked channel {event.voice_channel_id}"
            )

    async def on_renamed(self, event: VoiceChannelRenamed) -> None:
        session = self.store.get(event.voice_channel_id)
        if session is None or session.is_archiving:
            return
        self.store.record_rename(event.voice_channel_id, event.name)
        try:
            await self.retry_policy.call(
                self.platform.rename_channel, session.thread_id, event.name
            )
        except PlatformError:
            logger.exception(f"Failed to rename thread {session.thread_id}")

    async def on_removed(self, event: VoiceChannelRemoved) -> None:
        vc_id = event.voice_channel_id
        try:
            session = self.store.begin_archive(vc_id)
        except SessionNotFoundError:
            logger.debug(f"Ignoring removal of untracked voice channel {vc_id}")
            return
        except SessionAlreadyArchivingError:
            logger.debug(f"Voice channel {vc_id} is already archiving")
            return

        summary = SessionSummary.from_session(session, ended_at=event.occurred_at)
        try:
            try:
                await self.retry_policy.call(
                    self.platform.send_message,
                    session.thread_id,
                    messages.render_summary(summary),
                )
            except PlatformError:
                logger.exception(f"Failed to post summary to thread {session.thread_id}")
            try:
                await self.retry_policy.call(
                    self.platform.archive_thread, session.thread_id
                )
            except PlatformError:
                logger.exception(f"Failed to archive thread {session.thread_id}")
            else:
                logger.info(
                    f"Archived thread {session.thread_id} for voice channel {vc_id} "
                    f"after {summary.duration} with {summary.participant_count} participants"
                )
        finally:
            self.store.remove(vc_id)

    async def _post_creation_notices(
        self, event: VoiceChannelAppeared, thread_id: int, name: str
    ) -> None:
        notices = [
            (
                self.platform.send_message,
                self.thread_channel_id,
                messages.created_notice(
                    event.creator_id, event.voice_channel_id, thread_id
                ),
            ),
            (
                self.platform.send_message,
                event.voice_channel_id,
                messages.thread_link(thread_id),
            ),
            (
                self.platform.send_rename_control,
                thread_id,
                messages.welcome(event.creator_id, name),
            ),
        ]
        for send, channel_id, content in notices:
            try:
                await self.retry_policy.call(send, channel_id, content)
            except PlatformError:
                logger.exception(f"Failed to post notice to channel {channel_id}")
