# tests/test_polling.py
import asyncio

import pytest

from fakes import FakeStoreClient, order
from storefront_client.dashboard import DashboardState
from storefront_client.errors import NetworkError
from storefront_client.polling import PollingRefresher


def test_refresher_ticks_until_stopped():
    async def scenario():
        calls = []

        async def tick():
            calls.append(1)

        r = PollingRefresher(tick, interval=0.01)
        r.start()
        assert r.running
        await asyncio.sleep(0.06)
        r.stop()
        await asyncio.sleep(0.001)
        seen = len(calls)
        await asyncio.sleep(0.05)
        return r, seen, len(calls)

    r, seen, later = asyncio.run(scenario())
    assert seen >= 2
    assert later == seen
    assert r.running is False


def test_refresher_does_not_wait_for_slow_ticks():
    async def scenario():
        in_flight = 0
        peak = 0

        async def slow_tick():
            nonlocal in_flight, peak
            in_flight += 1
            peak = max(peak, in_flight)
            await asyncio.sleep(0.05)
            in_flight -= 1

        r = PollingRefresher(slow_tick, interval=0.01)
        r.start()
        await asyncio.sleep(0.045)
        r.stop()
        await asyncio.sleep(0.06)
        return peak

    assert asyncio.run(scenario()) > 1


def test_refresher_keeps_going_after_failures():
    async def scenario():
        calls = []

        async def failing_tick():
            calls.append(1)
            raise RuntimeError("boom")

        r = PollingRefresher(failing_tick, interval=0.01)
        r.start()
        await asyncio.sleep(0.06)
        r.stop()
        await asyncio.sleep(0.001)
        return len(calls)

    assert asyncio.run(scenario()) >= 2


def test_refresher_rejects_bad_interval():
    async def tick():
        pass

    with pytest.raises(ValueError):
        PollingRefresher(tick, interval=0)


def test_dashboard_polls_orders_and_stops_on_deactivate():
    async def scenario():
        fake = FakeStoreClient(orders=[order("o1")])
        state = DashboardState(fake, poll_interval=0.01)
        await state.activate()
        initial = fake.order_calls

        fake.orders = [order("o1"), order("o2")]
        fake.order_error = NetworkError("flaky")
        await asyncio.sleep(0.05)
        fake.order_error = None
        await asyncio.sleep(0.08)
        assert len(state.orders) == 2

        state.deactivate()
        await asyncio.sleep(0.001)
        stopped_at = fake.order_calls
        await asyncio.sleep(0.05)
        return initial, stopped_at, fake.order_calls, fake.product_calls

    initial, stopped_at, final, product_calls = asyncio.run(scenario())
    assert initial == 1
    assert stopped_at >= initial + 2
    assert final == stopped_at
    # only orders are polled
    assert product_calls == 1
