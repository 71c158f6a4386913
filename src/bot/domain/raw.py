from dataclasses import dataclass
from enum import StrEnum


class ChannelKind(StrEnum):
    """チャンネル種別"""

    VOICE = "voice"
    STAGE = "stage"
    OTHER = "other"


@dataclass(frozen=True)
class RawChannel:
    """プラットフォームから届いたチャンネルの形"""

    id: int
    name: str
    kind: ChannelKind
    category_id: int | None = None
    member_ids: tuple[int, ...] = ()


@dataclass(frozen=True)
class RawVoiceStateUpdate:
    member_id: int
    before: RawChannel | None
    after: RawChannel | None


@dataclass(frozen=True)
class RawChannelDelete:
    channel: RawChannel


@dataclass(frozen=True)
class RawChannelUpdate:
    before: RawChannel
    after: RawChannel
