"""
Session Broadcaster Tests
"""

import pytest

from fxpulse.services.session import AnalysisSession
from fxpulse.services.stream import SessionBroadcaster

from tests.conftest import FakePredictor, rising_bars


@pytest.fixture
def session() -> AnalysisSession:
    return AnalysisSession(pair="EUR/USD", predictor=FakePredictor())


class TestSessionBroadcaster:

    @pytest.mark.asyncio
    async def test_publish_reaches_every_client(self, session):
        broadcaster = SessionBroadcaster()
        first = broadcaster.create_queue("a")
        second = broadcaster.create_queue("b")

        broadcaster.publish(session.view())

        assert first.qsize() == 1
        assert second.qsize() == 1
        assert broadcaster.latest.pair == "EUR/USD"

    @pytest.mark.asyncio
    async def test_full_queue_drops_oldest(self, session):
        broadcaster = SessionBroadcaster(maxsize=2)
        queue = broadcaster.create_queue("slow")

        for pair in ("EUR/USD", "USD/JPY", "GBP/USD"):
            session.set_pair(pair)
            broadcaster.publish(session.view())

        assert queue.qsize() == 2
        assert (await queue.get()).pair == "USD/JPY"
        assert (await queue.get()).pair == "GBP/USD"

    @pytest.mark.asyncio
    async def test_removed_client_gets_nothing(self, session):
        broadcaster = SessionBroadcaster()
        queue = broadcaster.create_queue("gone")
        broadcaster.remove_queue("gone")

        broadcaster.publish(session.view())
        assert queue.empty()
        assert broadcaster.client_count == 0

    @pytest.mark.asyncio
    async def test_session_listener_publishes_every_update(self, session):
        broadcaster = SessionBroadcaster()
        queue = broadcaster.create_queue("client")
        session.add_listener(broadcaster.publish)

        await session.load_history(rising_bars(5))
        await session.wait_for_prediction()

        # One view for the load, one for the accepted prediction
        assert queue.qsize() == 2
        latest = broadcaster.latest
        assert latest.prediction is not None
        assert len(latest.bars) == 5
