from datetime import timedelta

from src.bot.domain.session import SessionSummary

UNKNOWN_CHANNEL_NAME = "不明なチャンネル"

# RENAME RESPONSES
SESSION_CLOSED = "❌そのVCは既に解散しています"
OWNER_ONLY = "❌VCのオーナーのみが名前を変更できます"
INVALID_NAME = "❌チャンネル名は1〜100文字で入力してください"
RENAME_FAILED = "❌名前の変更に失敗しました。時間をおいて再度お試しください。"
RENAMED = "✅名前を変更しました"


def mention_user(user_id: int) -> str:
    return f"<@{user_id}>"


def mention_channel(channel_id: int) -> str:
    return f"<#{channel_id}>"


def created_notice(creator_id: int, voice_channel_id: int, thread_id: int) -> str:
    return (
        f"{mention_user(creator_id)} さんが新しいVCを作成しました。\n"
        f"VCに参加する→ {mention_channel(voice_channel_id)}\n"
        f"VCチャット→ {mention_channel(thread_id)}"
    )


def thread_link(thread_id: int) -> str:
    return f"VCチャット→ {mention_channel(thread_id)}"


def welcome(creator_id: int, channel_name: str) -> str:
    return (
        f"{mention_user(creator_id)} `{channel_name}`へようこそ。\n"
        "興味を引くチャンネル名に変えてみんなを呼び込もう！"
    )


def format_duration(duration: timedelta) -> str:
    total = max(0, int(duration.total_seconds()))
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    if hours:
        return f"{hours}時間{minutes:02d}分{seconds:02d}秒"
    if minutes:
        return f"{minutes}分{seconds:02d}秒"
    return f"{seconds}秒"


def render_summary(summary: SessionSummary) -> str:
    name = summary.name or UNKNOWN_CHANNEL_NAME
    lines = [
        f"📦 VC「{name}」が解散しました",
        f"通話時間: {format_duration(summary.duration)}",
    ]
    if summary.participants:
        lines.append(f"参加者 ({summary.participant_count}人):")
        lines.extend(f"- {mention_user(m)}" for m in summary.participants)
    else:
        lines.append("参加者: なし")
    return "\n".join(lines)
