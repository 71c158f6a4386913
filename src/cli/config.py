import typer

from container import container


def _mask(token: str | None) -> str:
    if not token:
        return "未設定"
    return f"{token[:4]}***" if len(token) > 8 else "***"


def handle_config_command() -> None:
    settings = container.settings()
    retry_policy = container.retry_policy()

    typer.echo(f"Bot token: {_mask(container.config.discord_bot_token())}")
    typer.echo(f"Log level: {container.config.log_level()}")
    typer.echo(f"VCカテゴリ: {settings.vc_category_id}")
    ignored = ", ".join(str(c) for c in sorted(settings.vc_ignored_channels))
    typer.echo(f"無視するVC: {ignored or 'なし'}")
    typer.echo(f"スレッド作成先: {settings.thread_channel_id}")
    typer.echo(
        f"リトライ: {retry_policy.attempts}回 "
        f"(base {retry_policy.base_wait}s, max {retry_policy.max_wait}s)"
    )
