from datetime import datetime
from logging import getLogger

from ..domain.session import VoiceSession

logger = getLogger(__name__)


class SessionAlreadyExistsError(Exception):
    pass


class SessionNotFoundError(Exception):
    pass


class SessionAlreadyArchivingError(Exception):
    pass


class SessionStore:
    """
    VC -> セッションのインメモリレジストリ
    すべての操作は同期的でawaitを含まないため、イベントループ上では互いに割り込まない
    外部にはスナップショットのみを返し、VoiceSession本体は保持させない
    """

    def __init__(self):
        self._sessions: dict[int, VoiceSession] = {}
        # スレッド -> VC の逆引き
        self._thread_to_vc: dict[int, int] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, voice_channel_id: int) -> bool:
        return voice_channel_id in self._sessions

    def get(self, voice_channel_id: int) -> VoiceSession | None:
        session = self._sessions.get(voice_channel_id)
        return session.snapshot() if session is not None else None

    def create(
        self,
        voice_channel_id: int,
        thread_id: int,
        started_at: datetime,
        name: str = "",
    ) -> None:
        if voice_channel_id in self._sessions:
            raise SessionAlreadyExistsError(
                f"Session already exists for voice channel {voice_channel_id}"
            )
        self._sessions[voice_channel_id] = VoiceSession(
            voice_channel_id=voice_channel_id,
            thread_id=thread_id,
            started_at=started_at,
            name=name,
        )
        self._thread_to_vc[thread_id] = voice_channel_id

    def record_join(
        self, voice_channel_id: int, member_id: int, joined_at: datetime
    ) -> bool:
        """参加を記録する。初参加ならTrueを返す"""
        session = self._require(voice_channel_id)
        if session.is_archiving:
            logger.debug(
                f"Ignoring join of {member_id} to archiving session {voice_channel_id}"
            )
            return False
        session.present.add(member_id)
        if member_id in session.participants:
            return False
        session.participants[member_id] = joined_at
        return True

    def record_leave(self, voice_channel_id: int, member_id: int) -> None:
        session = self._require(voice_channel_id)
        if session.is_archiving:
            return
        session.present.discard(member_id)

    def record_rename(self, voice_channel_id: int, name: str) -> None:
        session = self._require(voice_channel_id)
        if not session.is_archiving:
            session.name = name

    def begin_archive(self, voice_channel_id: int) -> VoiceSession:
        session = self._require(voice_channel_id)
        if session.is_archiving:
            raise SessionAlreadyArchivingError(
                f"Session for voice channel {voice_channel_id} is already archiving"
            )
        session.is_archiving = True
        return session.snapshot()

    def remove(self, voice_channel_id: int) -> None:
        session = self._sessions.pop(voice_channel_id, None)
        if session is None:
            logger.debug(f"No session to remove for voice channel {voice_channel_id}")
            return
        self._thread_to_vc.pop(session.thread_id, None)

    def voice_channel_for_thread(self, thread_id: int) -> int:
        """スレッドに紐づく稼働中のVCを逆引きする。解散済み・解散中ならエラー"""
        voice_channel_id = self._thread_to_vc.get(thread_id)
        if voice_channel_id is None:
            raise SessionNotFoundError(f"No session linked to thread {thread_id}")
        session = self._sessions[voice_channel_id]
        if session.is_archiving:
            raise SessionNotFoundError(
                f"Session linked to thread {thread_id} is archiving"
            )
        return voice_channel_id

    def _require(self, voice_channel_id: int) -> VoiceSession:
        session = self._sessions.get(voice_channel_id)
        if session is None:
            raise SessionNotFoundError(
                f"No session exists for voice channel {voice_channel_id}"
            )
        return session
