import time

import pytest

from models.search_outcome import ProgressEvent
from orchestrator.cancellation import CancellationToken
from orchestrator.progress import ProgressReporter, page_progress


def test_page_progress_is_monotonic_and_bounded():
    values = [page_progress(p, 50) for p in range(51)]
    assert values == sorted(values)
    assert values[0] == 10
    assert values[-1] == 90
    assert max(values[:-1]) < 90


def test_page_progress_clamps_out_of_range():
    assert page_progress(-3, 10) == 10
    assert page_progress(500, 10) == 90


def test_reporter_never_decreases():
    events = []
    reporter = ProgressReporter(events.append)
    reporter.report(40, "a")
    reporter.report(20, "b")
    assert [e.percent for e in events] == [40, 40]


def test_reporter_holds_back_100_until_finish():
    events = []
    reporter = ProgressReporter(events.append)
    reporter.report(100, "almost")
    reporter.finish("done")
    reporter.finish("again")
    reporter.report(50, "late")
    assert [e.percent for e in events] == [99, 100]
    assert reporter.last_event == ProgressEvent(100, "done")


def test_reporter_without_sink_tracks_last_event():
    reporter = ProgressReporter()
    reporter.report(30, "x")
    assert reporter.last_event.percent == 30
    assert not reporter.finished


def test_progress_event_range_checked():
    with pytest.raises(ValueError):
        ProgressEvent(101, "too much")


def test_token_is_set_once():
    token = CancellationToken()
    assert not token.is_cancelled
    token.cancel()
    token.cancel()
    assert token.is_cancelled


def test_cancel_after_triggers():
    token = CancellationToken()
    token.cancel_after(0.05)
    deadline = time.monotonic() + 2
    while not token.is_cancelled and time.monotonic() < deadline:
        time.sleep(0.01)
    assert token.is_cancelled


def test_disarm_stops_pending_timer():
    token = CancellationToken()
    token.cancel_after(0.05)
    token.disarm()
    time.sleep(0.15)
    assert not token.is_cancelled


def test_cancel_after_non_positive_cancels_now():
    token = CancellationToken()
    token.cancel_after(0)
    assert token.is_cancelled
