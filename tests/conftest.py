import heapq
import random

import pytest

from director import DirectorEngine


class FakeTimer:
    """Virtual-clock timer: callbacks run only when the test advances time."""

    def __init__(self):
        self.now = 0.0
        self.delays = []
        self._queue = []
        self._seq = 0

    def clock(self) -> float:
        return self.now

    def schedule(self, seconds, callback):
        self._seq += 1
        self.delays.append(seconds)
        heapq.heappush(self._queue, (self.now + seconds, self._seq, callback))
        return self._seq

    @property
    def pending(self) -> int:
        return len(self._queue)

    def step(self) -> float:
        when, _seq, callback = heapq.heappop(self._queue)
        self.now = max(self.now, when)
        callback()
        return when

    def run(self, limit: int = 1000) -> None:
        for _ in range(limit):
            if not self._queue:
                return
            self.step()
        raise AssertionError("timer did not drain")


class RecordingHost:
    def __init__(self):
        self.commands = []
        self.inputs = []
        self.buffers = {}

    def call_command(self, command):
        self.commands.append(command)
        if callable(command):
            command()

    def send_input(self, events):
        self.inputs.append(list(events))

    def append_to_buffer(self, name, text):
        self.buffers.setdefault(name, []).append(text)

    def lines(self, name="trace"):
        return "".join(self.buffers.get(name, [])).splitlines()

    def messages(self, name="trace"):
        # Drop the "%06d %03d " prefix.
        return [line[11:] for line in self.lines(name)]


@pytest.fixture
def timer():
    return FakeTimer()


@pytest.fixture
def host():
    return RecordingHost()


@pytest.fixture
def engine(host, timer):
    return DirectorEngine(host, timer, clock=timer.clock, rng=random.Random(7))
