from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta


@dataclass
class VoiceSession:
    """
    1つのVCの生存期間と参加者を表すセッション
    SessionStoreだけがインスタンスを保持する
    """

    voice_channel_id: int
    thread_id: int
    started_at: datetime
    name: str = ""
    # メンバーID -> 初参加時刻（挿入順 = 初参加順）
    participants: dict[int, datetime] = field(default_factory=dict)
    present: set[int] = field(default_factory=set)
    is_archiving: bool = False

    def snapshot(self) -> "VoiceSession":
        return replace(
            self,
            participants=dict(self.participants),
            present=set(self.present),
        )


@dataclass(frozen=True)
class SessionSummary:
    voice_channel_id: int
    thread_id: int
    name: str
    started_at: datetime
    ended_at: datetime
    participants: tuple[int, ...] = ()

    @property
    def duration(self) -> timedelta:
        return self.ended_at - self.started_at

    @property
    def participant_count(self) -> int:
        return len(self.participants)

    @classmethod
    def from_session(cls, session: VoiceSession, ended_at: datetime) -> "SessionSummary":
        return cls(
            voice_channel_id=session.voice_channel_id,
            thread_id=session.thread_id,
            name=session.name,
            started_at=session.started_at,
            ended_at=ended_at,
            participants=tuple(session.participants),
        )
