import asyncio

import pytest

from src.dashboard.controller import DashboardController
from src.dashboard.runtime import LoopRunner


@pytest.fixture
def runner():
    r = LoopRunner("test-loop")
    yield r
    r.stop()


def test_call_runs_on_loop_thread(runner):
    def inside():
        return asyncio.get_running_loop() is runner.loop

    assert runner.call(inside) is True


def test_run_returns_coroutine_result(runner):
    async def add(a, b):
        await asyncio.sleep(0.01)
        return a + b

    assert runner.run(add(2, 3)) == 5


def test_drives_controller_across_calls(runner, fake_client, fast_settings, forecast):
    client = fake_client()
    controller = runner.call(DashboardController, client, fast_settings)
    runner.call(controller.start)

    async def wait_idle():
        while controller.busy:
            await asyncio.sleep(0.005)

    runner.run(wait_idle(), timeout=2)
    snap = runner.call(controller.snapshot)
    assert snap.forecast is forecast
    assert snap.loading is False
    runner.run(controller.aclose())
    assert client.closed


def test_sessions_share_one_client(runner, fake_client, fast_settings):
    client = fake_client()
    first = runner.call(DashboardController, client, fast_settings)
    second = runner.call(DashboardController, client, fast_settings)
    runner.call(first.start)
    runner.call(second.start)
    runner.run(first.aclose(close_client=False))
    assert client.closed is False

    async def wait_idle():
        while second.busy:
            await asyncio.sleep(0.005)

    runner.run(wait_idle(), timeout=2)
    assert runner.call(second.snapshot).loading is False
