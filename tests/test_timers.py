"""Tests for terrarium.timers - one-shot delayed work."""

from terrarium.timers import TimerQueue


class TestTimerQueue:
    def test_fires_when_due(self):
        queue = TimerQueue()
        queue.add("flee", 0.5)
        assert queue.advance(0.3) == []
        fired = queue.advance(0.3)
        assert [t.name for t in fired] == ["flee"]
        assert len(queue) == 0

    def test_fires_in_insertion_order(self):
        queue = TimerQueue()
        queue.add("a", 1.0)
        queue.add("b", 0.5)
        queue.add("c", 3.0)
        fired = queue.advance(1.0)
        assert [t.name for t in fired] == ["a", "b"]
        assert [t.name for t in queue.pending()] == ["c"]

    def test_data_is_kept(self):
        queue = TimerQueue()
        queue.add("play_next", 0.1, leg=2)
        (timer,) = queue.advance(0.1)
        assert timer.data == {"leg": 2}

    def test_pending_by_name_and_clear(self):
        queue = TimerQueue()
        queue.add("flee", 1.0)
        queue.add("play_next", 1.0)
        assert len(queue.pending("flee")) == 1
        queue.clear()
        assert queue.pending() == []
