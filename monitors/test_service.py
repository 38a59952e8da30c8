import io

import pytest

from config import AgentConfig
from monitors import PollLoop, LoopState, AlertSink, StatusError, NetworkError
from monitors.service import FINAL_NOTICE


HEALTHY = b'1.0,1000,100,104857600,10485760,1000000000,1000'
HOT = b'31,1000,801,104857600,10485760,1000000000,1000'


class FakeFetcher:
    """Replays a script of bodies / exceptions, one per call."""

    def __init__(self, script):
        self.script = list(script)
        self.calls = 0

    def __call__(self):
        item = self.script[self.calls]
        self.calls += 1
        if isinstance(item, Exception):
            raise item
        return item


def make_loop(script, **config):
    out = io.StringIO()
    sleeps = []
    loop = PollLoop(AgentConfig(**config), fetcher=FakeFetcher(script), sink=AlertSink(out), sleep=sleeps.append)
    return loop, out, sleeps


def test_three_consecutive_status_failures_terminate():
    loop, out, sleeps = make_loop([StatusError(500)] * 3)
    assert loop.run() != 0
    assert loop.state is LoopState.TERMINATED
    assert loop.consecutive_failures == 3
    assert out.getvalue() == FINAL_NOTICE + '\n'
    assert out.getvalue().count(FINAL_NOTICE) == 1
    # no sleep after the terminating failure
    assert sleeps == [60.0, 60.0]


def test_success_resets_failure_counter():
    loop, out, _ = make_loop([StatusError(503), NetworkError('down'), HEALTHY])
    assert loop.step() is LoopState.POLLING
    assert loop.step() is LoopState.POLLING
    assert loop.consecutive_failures == 2
    assert loop.step() is LoopState.POLLING
    assert loop.consecutive_failures == 0
    assert FINAL_NOTICE not in out.getvalue()


def test_keeps_polling_while_failures_are_interleaved():
    script = [StatusError(500), StatusError(500), HEALTHY] * 10
    loop, out, sleeps = make_loop(script)
    for _ in range(len(script)):
        assert loop.step() is LoopState.POLLING
    assert len(sleeps) == len(script)
    assert out.getvalue() == ''


def test_decode_failures_are_counted():
    loop, out, _ = make_loop([b'1,2,3,4,5,6', b'1,2,3,4,5,6,7,8', b'1,0,0,1,1,1,1'])
    assert loop.run() == 1
    assert out.getvalue() == FINAL_NOTICE + '\n'


def test_alerts_are_emitted_on_success():
    loop, out, sleeps = make_loop([HOT])
    loop.step()
    assert out.getvalue() == 'Load Average is too high: 31\nMemory usage too high: 80%\n'
    assert sleeps == [60.0]


def test_uses_configured_interval_and_budget():
    loop, out, sleeps = make_loop([HEALTHY] + [StatusError(404)] * 5, poll_interval=2.5, failure_budget=5)
    assert loop.run() == 1
    assert loop.cycles == 6
    assert sleeps == [2.5] * 5


def test_step_after_termination_raises():
    loop, _, _ = make_loop([StatusError(500)], failure_budget=1)
    assert loop.step() is LoopState.TERMINATED
    with pytest.raises(RuntimeError):
        loop.step()


def test_unexpected_errors_propagate():
    def broken():
        raise KeyError('bug')

    loop = PollLoop(AgentConfig(), fetcher=broken, sink=AlertSink(io.StringIO()), sleep=lambda s: None)
    with pytest.raises(KeyError):
        loop.step()
    assert loop.consecutive_failures == 0
