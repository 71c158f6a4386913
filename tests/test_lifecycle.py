"""Unit tests for LifecycleCoordinator."""

import asyncio
from datetime import timedelta

import pytest

from src.bot.application.dispatcher import SessionEventDispatcher
from src.bot.application.lifecycle import LifecycleCoordinator
from src.bot.application.platform import PlatformError, TransientPlatformError
from src.bot.application.session_store import SessionStore
from src.bot.domain.events import (
    MemberJoined,
    MemberLeft,
    VoiceChannelAppeared,
    VoiceChannelRemoved,
    VoiceChannelRenamed,
)

from .fakes import T0, THREAD_CHANNEL_ID, FakePlatformClient

A = 1001
B = 1002


def appeared(vc: int = 1, name: str = "雑談", creator: int = A, at=T0):
    return VoiceChannelAppeared(vc, name, creator, at)


def removed(vc: int = 1, seconds: int = 600):
    return VoiceChannelRemoved(vc, T0 + timedelta(seconds=seconds))


@pytest.fixture
def coordinator(store, platform, retry_policy) -> LifecycleCoordinator:
    return LifecycleCoordinator(
        store, platform, THREAD_CHANNEL_ID, retry_policy=retry_policy
    )


@pytest.mark.asyncio
async def test_appearance_creates_thread_and_session(
    coordinator: LifecycleCoordinator,
    store: SessionStore,
    platform: FakePlatformClient,
):
    await coordinator.handle(appeared())

    assert platform.calls_to("create_thread") == [
        ("create_thread", THREAD_CHANNEL_ID, "雑談")
    ]
    session = store.get(1)
    assert session is not None
    assert session.thread_id == 5000
    assert session.started_at == T0

    # セッション登録後に案内を投稿する
    sent = [c for c in platform.calls if c[0] in ("send_message", "send_rename_control")]
    assert [c[1] for c in sent] == [THREAD_CHANNEL_ID, 1, 5000]
    assert f"<@{A}>" in sent[0][2]
    assert sent[2][0] == "send_rename_control"


@pytest.mark.asyncio
async def test_scenario_summary_after_600_seconds(
    coordinator: LifecycleCoordinator,
    store: SessionStore,
    platform: FakePlatformClient,
):
    await coordinator.handle(appeared())
    await coordinator.handle(MemberJoined(1, A, T0))
    await coordinator.handle(MemberJoined(1, B, T0 + timedelta(seconds=5)))
    await coordinator.handle(MemberLeft(1, A, T0 + timedelta(seconds=30)))
    platform.calls.clear()

    await coordinator.handle(removed(seconds=600))

    summary_call, archive_call = platform.calls
    assert summary_call[:2] == ("send_message", 5000)
    assert "通話時間: 10分00秒" in summary_call[2]
    assert "参加者 (2人):" in summary_call[2]
    assert f"- <@{A}>\n- <@{B}>" in summary_call[2]
    assert archive_call == ("archive_thread", 5000)
    assert store.get(1) is None


@pytest.mark.asyncio
async def test_repeated_joins_count_once(
    coordinator: LifecycleCoordinator, platform: FakePlatformClient
):
    await coordinator.handle(appeared())
    for _ in range(3):
        await coordinator.handle(MemberJoined(1, A, T0))
        await coordinator.handle(MemberLeft(1, A, T0))

    await coordinator.handle(removed())

    summary = platform.calls_to("send_message")[-1][2]
    assert "参加者 (1人):" in summary


@pytest.mark.asyncio
async def test_duplicate_appearance_is_noop(
    coordinator: LifecycleCoordinator,
    store: SessionStore,
    platform: FakePlatformClient,
):
    await coordinator.handle(appeared())
    await coordinator.handle(appeared())

    assert len(platform.calls_to("create_thread")) == 1
    assert len(store) == 1


@pytest.mark.asyncio
async def test_back_to_back_appearances_through_dispatcher(
    coordinator: LifecycleCoordinator,
    store: SessionStore,
    platform: FakePlatformClient,
):
    dispatcher = SessionEventDispatcher(coordinator.handle)

    dispatcher.dispatch(appeared())
    dispatcher.dispatch(appeared())
    await dispatcher.join()

    assert len(platform.calls_to("create_thread")) == 1
    assert len(store) == 1


@pytest.mark.asyncio
async def test_duplicate_removal_archives_once(
    coordinator: LifecycleCoordinator,
    store: SessionStore,
    platform: FakePlatformClient,
):
    await coordinator.handle(appeared())

    await coordinator.handle(removed())
    await coordinator.handle(removed())

    assert len(platform.calls_to("archive_thread")) == 1
    assert store.get(1) is None


@pytest.mark.asyncio
async def test_concurrent_removal_sees_archiving(
    coordinator: LifecycleCoordinator,
    store: SessionStore,
    platform: FakePlatformClient,
):
    await coordinator.handle(appeared())

    await asyncio.gather(coordinator.handle(removed()), coordinator.handle(removed()))

    assert len(platform.calls_to("archive_thread")) == 1
    assert store.get(1) is None


@pytest.mark.asyncio
async def test_removal_before_appearance_is_noop_and_late_appearance_is_fresh(
    coordinator: LifecycleCoordinator,
    store: SessionStore,
    platform: FakePlatformClient,
):
    await coordinator.handle(removed(seconds=0))
    assert platform.calls == []

    await coordinator.handle(appeared(at=T0 + timedelta(seconds=1)))

    session = store.get(1)
    assert session is not None
    assert session.started_at == T0 + timedelta(seconds=1)


@pytest.mark.asyncio
async def test_reappearance_after_removal_is_new_session(
    coordinator: LifecycleCoordinator,
    store: SessionStore,
    platform: FakePlatformClient,
):
    await coordinator.handle(appeared())
    await coordinator.handle(MemberJoined(1, A, T0))
    await coordinator.handle(removed())

    await coordinator.handle(appeared(at=T0 + timedelta(hours=1)))

    session = store.get(1)
    assert session.thread_id == 5001
    assert session.participants == {}
    assert len(platform.calls_to("create_thread")) == 2


@pytest.mark.asyncio
async def test_membership_events_for_untracked_channel_are_dropped(
    coordinator: LifecycleCoordinator,
    store: SessionStore,
    platform: FakePlatformClient,
):
    await coordinator.handle(MemberJoined(1, A, T0))
    await coordinator.handle(MemberLeft(1, A, T0))
    await coordinator.handle(VoiceChannelRenamed(1, "名前", T0))

    assert platform.calls == []
    assert len(store) == 0


@pytest.mark.asyncio
async def test_transient_thread_failure_is_retried(
    coordinator: LifecycleCoordinator,
    store: SessionStore,
    platform: FakePlatformClient,
):
    platform.fail("create_thread", TransientPlatformError("503"), TransientPlatformError("429"))

    await coordinator.handle(appeared())

    assert len(platform.calls_to("create_thread")) == 3
    assert store.get(1) is not None


@pytest.mark.asyncio
async def test_thread_creation_exhausted_records_nothing(
    coordinator: LifecycleCoordinator,
    store: SessionStore,
    platform: FakePlatformClient,
):
    platform.fail("create_thread", *(TransientPlatformError("503") for _ in range(3)))

    await coordinator.handle(appeared())

    assert len(platform.calls_to("create_thread")) == 3
    assert store.get(1) is None
    assert platform.calls_to("send_message") == []

    # 後から届いた出現イベントで作り直せる
    await coordinator.handle(appeared())
    assert store.get(1) is not None


@pytest.mark.asyncio
async def test_permanent_thread_failure_is_not_retried(
    coordinator: LifecycleCoordinator,
    store: SessionStore,
    platform: FakePlatformClient,
):
    platform.fail("create_thread", PlatformError("forbidden"))

    await coordinator.handle(appeared())

    assert len(platform.calls_to("create_thread")) == 1
    assert store.get(1) is None


@pytest.mark.asyncio
async def test_notice_failure_keeps_session(
    coordinator: LifecycleCoordinator,
    store: SessionStore,
    platform: FakePlatformClient,
):
    platform.fail("send_message", PlatformError("forbidden"))

    await coordinator.handle(appeared())

    assert store.get(1) is not None
    assert len(platform.calls_to("send_rename_control")) == 1


@pytest.mark.asyncio
async def test_archive_failure_still_removes_session(
    coordinator: LifecycleCoordinator,
    store: SessionStore,
    platform: FakePlatformClient,
):
    await coordinator.handle(appeared())
    platform.fail("archive_thread", *(TransientPlatformError("500") for _ in range(3)))

    await coordinator.handle(removed())

    assert len(platform.calls_to("archive_thread")) == 3
    assert store.get(1) is None


@pytest.mark.asyncio
async def test_summary_failure_still_archives(
    coordinator: LifecycleCoordinator,
    store: SessionStore,
    platform: FakePlatformClient,
):
    await coordinator.handle(appeared())
    platform.calls.clear()
    platform.fail("send_message", PlatformError("missing access"))

    await coordinator.handle(removed())

    assert platform.calls_to("archive_thread") == [("archive_thread", 5000)]
    assert store.get(1) is None


@pytest.mark.asyncio
async def test_vc_rename_renames_thread(
    coordinator: LifecycleCoordinator,
    store: SessionStore,
    platform: FakePlatformClient,
):
    await coordinator.handle(appeared())

    await coordinator.handle(VoiceChannelRenamed(1, "カラオケ", T0))

    assert platform.calls_to("rename_channel") == [("rename_channel", 5000, "カラオケ")]
    assert store.get(1).name == "カラオケ"


@pytest.mark.parametrize(
    "sequence, tracked",
    [
        (["appear"], True),
        (["appear", "remove"], False),
        (["remove", "appear"], True),
        (["appear", "appear", "remove"], False),
        (["appear", "remove", "remove", "appear"], True),
        (["remove", "remove"], False),
        (["appear", "remove", "appear", "remove"], False),
    ],
)
@pytest.mark.asyncio
async def test_session_exists_iff_unmatched_appearance(
    coordinator: LifecycleCoordinator, store: SessionStore, sequence, tracked
):
    for step in sequence:
        await coordinator.handle(appeared() if step == "appear" else removed())

    assert (store.get(1) is not None) is tracked
