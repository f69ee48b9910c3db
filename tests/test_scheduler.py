import pytest

from floorplan_geometry.processing.scheduler import RebuildScheduler


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def calls():
    return []


@pytest.fixture
def scheduler(clock, calls):
    def rebuild(payload):
        calls.append(payload)
        return f"built {payload}"

    return RebuildScheduler(rebuild, cooldown=0.5, clock=clock)


def test_first_request_runs_immediately(scheduler, calls):
    assert scheduler.request("a") is True
    assert calls == ["a"]
    assert scheduler.last_result == "built a"
    assert not scheduler.pending


def test_burst_coalesces_into_one_rebuild(scheduler, clock, calls):
    scheduler.request(0)
    for i in range(1, 11):
        clock.advance(0.01)
        assert scheduler.request(i) is False

    assert calls == [0]
    assert scheduler.pending
    assert scheduler.coalesced == 9

    # Still inside the cooldown window
    assert scheduler.poll() is False

    clock.advance(0.5)
    assert scheduler.poll() is True
    assert calls == [0, 10]
    assert scheduler.executions == 2
    assert not scheduler.pending

    assert scheduler.poll() is False


def test_request_after_cooldown_runs(scheduler, clock, calls):
    scheduler.request("a")
    clock.advance(0.6)
    assert scheduler.request("b") is True
    assert calls == ["a", "b"]


def test_request_waits_behind_pending(scheduler, clock, calls):
    scheduler.request("a")
    scheduler.request("b")
    clock.advance(1.0)

    # Cooldown passed, but the pending request goes first
    assert scheduler.request("c") is False
    assert scheduler.poll() is True
    assert calls == ["a", "c"]


def test_flush_ignores_cooldown(scheduler, calls):
    scheduler.request("a")
    scheduler.request("b")
    assert scheduler.flush() is True
    assert calls == ["a", "b"]
    assert scheduler.flush() is False


def test_cancel_drops_pending(scheduler, clock, calls):
    scheduler.request("a")
    scheduler.request("b")
    assert scheduler.cancel() is True
    assert scheduler.cancel() is False

    clock.advance(1.0)
    assert scheduler.poll() is False
    assert calls == ["a"]


def test_cooldown_counts_from_completion(clock, calls):
    def slow_rebuild(payload):
        calls.append(payload)
        clock.advance(2.0)

    scheduler = RebuildScheduler(slow_rebuild, cooldown=0.5, clock=clock)
    scheduler.request("a")
    assert scheduler.last_completed == 2.0
    assert scheduler.request("b") is False

    clock.advance(0.5)
    assert scheduler.poll() is True


def test_failed_rebuild_still_starts_cooldown(clock):
    def broken(payload):
        raise RuntimeError("boom")

    scheduler = RebuildScheduler(broken, cooldown=0.5, clock=clock)
    with pytest.raises(RuntimeError):
        scheduler.request("a")

    assert scheduler.executions == 1
    assert scheduler.last_completed == 0.0
    assert not scheduler.ready()


def test_zero_cooldown_never_defers(clock, calls):
    scheduler = RebuildScheduler(calls.append, cooldown=0.0, clock=clock)
    for i in range(3):
        assert scheduler.request(i) is True
    assert calls == [0, 1, 2]


def test_negative_cooldown_rejected():
    with pytest.raises(ValueError):
        RebuildScheduler(lambda payload: None, cooldown=-1.0)
