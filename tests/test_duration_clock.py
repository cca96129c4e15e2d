from workout_engine.duration_clock import DurationClock


def test_elapsed_before_start_is_zero(fake_time):
    assert DurationClock().elapsed() == 0


def test_elapsed_is_floored(fake_time):
    clock = DurationClock()
    clock.start()
    fake_time[0] += 12.9
    assert clock.elapsed() == 12


def test_pause_freezes_and_resume_excludes_paused_span(fake_time):
    clock = DurationClock()
    clock.start()
    fake_time[0] += 30
    clock.pause()
    assert clock.is_paused

    fake_time[0] += 100
    assert clock.elapsed() == 30
    assert clock.elapsed() == 30

    clock.resume()
    assert clock.is_running
    assert clock.paused_seconds == 100
    fake_time[0] += 5
    assert clock.elapsed() == 35


def test_repeated_pause_and_resume_are_ignored(fake_time):
    clock = DurationClock()
    clock.pause()
    assert not clock.is_paused

    clock.start()
    fake_time[0] += 10
    clock.pause()
    fake_time[0] += 10
    clock.pause()
    clock.resume()
    clock.resume()
    assert clock.paused_seconds == 10
    assert clock.elapsed() == 10


def test_elapsed_never_negative(fake_time):
    clock = DurationClock()
    clock.start()
    fake_time[0] -= 50
    assert clock.elapsed() == 0

