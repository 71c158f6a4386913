from typing import Any, FrozenSet

from pydantic import BaseModel, Field, field_validator

from src.bot.domain.raw import ChannelKind, RawChannel


class VcThreadSettings(BaseModel):
    vc_category_id: int = Field(description="カスタムVCのカテゴリID")
    vc_ignored_channels: FrozenSet[int] = Field(
        default_factory=frozenset, description="無視するVCのチャンネルID"
    )
    thread_channel_id: int = Field(description="スレッドを作成するテキストチャンネルID")

    model_config = {"frozen": True}

    @field_validator("vc_ignored_channels", mode="before")
    @classmethod
    def _split_ignored_channels(cls, value: Any) -> Any:
        if value is None:
            return frozenset()
        if isinstance(value, str):
            return frozenset(
                int(part) for part in (p.strip() for p in value.split(",")) if part
            )
        return value

    def is_custom_vc(self, channel: RawChannel) -> bool:
        """カスタムVCかどうか判定する"""
        if channel.kind != ChannelKind.VOICE:
            return False
        if channel.category_id != self.vc_category_id:
            return False
        return channel.id not in self.vc_ignored_channels
