import asyncio

from src.dashboard.debounce import Debouncer


def test_only_last_value_fires_after_quiet_period():
    fired = []

    async def main():
        d = Debouncer(0.02, fired.append)
        for v in ("a", "ab", "abc"):
            d.push(v)
            await asyncio.sleep(0.005)
        assert fired == []
        assert d.pending
        await asyncio.sleep(0.05)
        assert not d.pending

    asyncio.run(main())
    assert fired == ["abc"]


def test_separate_bursts_fire_separately():
    fired = []

    async def main():
        d = Debouncer(0.01, fired.append)
        d.push(1)
        await asyncio.sleep(0.05)
        d.push(2)
        await asyncio.sleep(0.05)

    asyncio.run(main())
    assert fired == [1, 2]


def test_cancel_drops_pending_value():
    fired = []

    async def main():
        d = Debouncer(0.01, fired.append)
        d.push("x")
        d.cancel()
        assert not d.pending
        await asyncio.sleep(0.03)

    asyncio.run(main())
    assert fired == []
