"""Tests for SessionStore: lookup, deletion, idle eviction and the session cap."""

from conftest import FakeChatTransport, FakeOcrBackend
from core.extraction.extraction_gate import ExtractionGate
from runtime.agents.conversation_controller import ConversationController
from runtime.models.session_models import SessionStatus
from runtime.store.session_store import SessionStore


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def _factory(session_id: str) -> ConversationController:
    return ConversationController(
        ExtractionGate(FakeOcrBackend()), FakeChatTransport(), session_id=session_id
    )


class TestSessionStore:
    def test_sessions_are_independent(self) -> None:
        store = SessionStore(controller_factory=_factory)

        first = store.create_session()
        second = store.create_session()

        assert first.session_id != second.session_id
        assert first is not second
        assert store.get_session(first.session_id) is first
        assert first.status is SessionStatus.IDLE
        assert len(store) == 2

    def test_unknown_and_deleted_sessions(self) -> None:
        store = SessionStore(controller_factory=_factory)
        controller = store.create_session()

        assert store.get_session("nope") is None
        assert store.delete_session(controller.session_id) is True
        assert store.delete_session(controller.session_id) is False
        assert store.get_session(controller.session_id) is None


class TestSessionEviction:
    def test_idle_sessions_are_evicted(self) -> None:
        clock = FakeClock()
        store = SessionStore(controller_factory=_factory, idle_ttl=60, clock=clock)
        stale = store.create_session()
        clock.now += 30
        fresh = store.create_session()

        clock.now += 45

        assert store.get_session(stale.session_id) is None
        assert store.get_session(fresh.session_id) is fresh
        assert len(store) == 1

    def test_access_keeps_session_alive(self) -> None:
        clock = FakeClock()
        store = SessionStore(controller_factory=_factory, idle_ttl=60, clock=clock)
        controller = store.create_session()

        for _ in range(5):
            clock.now += 50
            assert store.get_session(controller.session_id) is controller

        assert store.evict_idle() == 0

    def test_evict_idle_reports_count(self) -> None:
        clock = FakeClock()
        store = SessionStore(controller_factory=_factory, idle_ttl=10, clock=clock)
        store.create_session()
        store.create_session()

        clock.now += 11

        assert store.evict_idle() == 2
        assert len(store) == 0

    def test_no_ttl_means_no_idle_eviction(self) -> None:
        clock = FakeClock()
        store = SessionStore(controller_factory=_factory, clock=clock)
        controller = store.create_session()

        clock.now += 10 ** 6

        assert store.get_session(controller.session_id) is controller

    def test_cap_evicts_least_recently_used(self) -> None:
        clock = FakeClock()
        store = SessionStore(controller_factory=_factory, max_sessions=2, clock=clock)
        first = store.create_session()
        second = store.create_session()
        store.get_session(first.session_id)

        third = store.create_session()

        assert len(store) == 2
        assert store.get_session(second.session_id) is None
        assert store.get_session(first.session_id) is first
        assert store.get_session(third.session_id) is third
