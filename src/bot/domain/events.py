from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class VoiceChannelAppeared:
    voice_channel_id: int
    name: str
    creator_id: int
    occurred_at: datetime


@dataclass(frozen=True)
class VoiceChannelRemoved:
    voice_channel_id: int
    occurred_at: datetime


@dataclass(frozen=True)
class VoiceChannelRenamed:
    voice_channel_id: int
    name: str
    occurred_at: datetime


@dataclass(frozen=True)
class MemberJoined:
    voice_channel_id: int
    member_id: int
    occurred_at: datetime


@dataclass(frozen=True)
class MemberLeft:
    voice_channel_id: int
    member_id: int
    occurred_at: datetime


LifecycleEvent = (
    VoiceChannelAppeared
    | VoiceChannelRemoved
    | VoiceChannelRenamed
    | MemberJoined
    | MemberLeft
)
