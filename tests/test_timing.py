import io
import math
import statistics

import pytest

from voxkit.timing import (
    Accumulator,
    DummyTimer,
    Timer,
    Timing,
    seconds_to_time_string,
)


def test_accumulator_basic_statistics():
    acc = Accumulator()
    samples = [1.0, 2.0, 3.0, 6.0]
    for s in samples:
        acc.add(s)
    assert acc.total_samples == len(samples)
    assert acc.sum == pytest.approx(sum(samples))
    assert acc.mean == pytest.approx(statistics.mean(samples))
    assert acc.min == min(samples)
    assert acc.max == max(samples)
    assert acc.rolling_mean() == pytest.approx(statistics.mean(samples))
    assert acc.lazy_variance() == pytest.approx(statistics.pvariance(samples))


def test_accumulator_window_keeps_recent_samples():
    acc = Accumulator()
    samples = [float(i) for i in range(60)]
    for s in samples:
        acc.add(s)
    assert acc.total_samples == 60
    assert acc.sum == pytest.approx(sum(samples))
    assert acc.rolling_mean() == pytest.approx(statistics.mean(samples[10:]))
    assert acc.lazy_variance() == pytest.approx(statistics.pvariance(samples[10:]))


def test_accumulator_custom_window():
    acc = Accumulator(window_size=2)
    for s in (10.0, 1.0, 3.0):
        acc.add(s)
    assert acc.rolling_mean() == pytest.approx(statistics.mean([1.0, 3.0]))
    assert acc.max == 10.0


def test_accumulator_empty():
    acc = Accumulator()
    assert acc.lazy_variance() == 0.0
    assert math.isnan(acc.mean)
    assert math.isnan(acc.rolling_mean())
    assert acc.total_samples == 0


def test_accumulator_rejects_bad_window():
    with pytest.raises(ValueError):
        Accumulator(window_size=0)


def test_seconds_to_time_string():
    assert seconds_to_time_string(1.5) == "01.500000"
    assert seconds_to_time_string(123.456789) == "123.456789"
    assert len(seconds_to_time_string(0.0)) == 9


def test_handles_are_stable_and_distinct():
    timing = Timing()
    a = timing.get_handle("alpha")
    b = timing.get_handle("beta")
    assert a != b
    assert timing.get_handle("alpha") == a
    assert timing.get_tag(a) == "alpha"
    assert timing.get_tag(b) == "beta"
    assert timing.get_tag(999) == ""
    assert timing.timers == {"alpha": a, "beta": b}


def test_add_time_by_handle_and_tag_agree():
    timing = Timing()
    handle = timing.get_handle("work")
    for s in (0.25, 0.75):
        timing.add_time(handle, s)
    assert timing.num_samples("work") == 2
    assert timing.num_samples(handle) == 2
    assert timing.total_seconds("work") == pytest.approx(1.0)
    assert timing.mean_seconds(handle) == pytest.approx(0.5)
    assert timing.min_seconds("work") == 0.25
    assert timing.max_seconds("work") == 0.75
    assert timing.variance_seconds("work") == pytest.approx(
        statistics.pvariance([0.25, 0.75])
    )


def test_hz_from_rolling_mean():
    timing = Timing()
    handle = timing.get_handle("loop")
    timing.add_time(handle, 0.5)
    timing.add_time(handle, 0.5)
    assert timing.hz("loop") == pytest.approx(1 / 0.5)


def test_hz_without_samples_raises():
    timing = Timing()
    timing.get_handle("idle")
    with pytest.raises(ValueError):
        timing.hz("idle")


def test_unknown_handle_raises():
    timing = Timing()
    with pytest.raises(IndexError):
        timing.total_seconds(3)


def test_report_empty():
    assert Timing().report() == ""


def test_report_layout():
    timing = Timing()
    timing.add_time(timing.get_handle("zeta"), 0.5)
    timing.get_handle("a_long_tag")
    text = timing.report()
    lines = text.splitlines()
    assert lines[0] == "SM Timing"
    assert lines[1] == "-----------"
    width = len("a_long_tag")
    assert lines[2].split("\t")[0] == "a_long_tag".ljust(width)
    assert lines[2].split("\t")[1].strip() == "0"
    zeta = lines[3].split("\t")
    assert zeta[0] == "zeta".ljust(width)
    assert zeta[1].strip() == "1"
    assert zeta[2] == seconds_to_time_string(0.5)
    assert zeta[4] == (
        "[" + seconds_to_time_string(0.5) + "," + seconds_to_time_string(0.5) + "]"
    )
    out = io.StringIO()
    timing.write(out)
    assert out.getvalue() == text


def test_reset_forgets_tags():
    timing = Timing()
    old = timing.get_handle("tag")
    timing.reset()
    assert timing.report() == ""
    assert timing.get_tag(old) == ""
    assert timing.get_handle("tag") != old


def test_timer_records_one_sample():
    timing = Timing()
    timer = Timer("job", timing=timing)
    assert timer.is_timing
    timer.stop()
    assert not timer.is_timing
    assert timing.num_samples("job") == 1
    assert timing.total_seconds("job") >= 0.0


def test_timer_context_manager():
    timing = Timing()
    with Timer("block", construct_stopped=True, timing=timing) as timer:
        assert timer.is_timing
    assert not timer.is_timing
    assert timing.num_samples("block") == 1


def test_timer_by_handle():
    timing = Timing()
    handle = timing.get_handle("h")
    timer = Timer(handle, timing=timing)
    timer.stop()
    timer.start()
    timer.stop()
    assert timer.handle == handle
    assert timing.num_samples(handle) == 2


def test_stopped_timer_cannot_stop():
    timing = Timing()
    timer = Timer("idle", construct_stopped=True, timing=timing)
    with pytest.raises(RuntimeError):
        timer.stop()
    assert timing.num_samples("idle") == 0


def test_dummy_timer_records_nothing():
    timing = Timing()
    timer = DummyTimer("x", timing=timing)
    timer.start()
    timer.stop()
    with timer:
        pass
    assert timer.is_timing is False
    assert timing.timers == {}