import pytest

from virtualsim import (ClockReplacement, FIFOReplacement, FrameTable, LRUReplacement,
                        WritePolicy, make_policy)


def full_table(*vpns):
    frames = FrameTable(len(vpns))
    for tick, vpn in enumerate(vpns, 1):
        frames.install(tick - 1, vpn, tick, False, WritePolicy.WRITE_THROUGH)
    return frames


@pytest.mark.parametrize("name, cls", [
    ("fifo", FIFOReplacement),
    ("LRU", LRUReplacement),
    ("Clock", ClockReplacement),
])
def test_make_policy(name, cls):
    assert isinstance(make_policy(name), cls)


def test_make_policy_rejects_unknown_name():
    with pytest.raises(ValueError):
        make_policy("random")


def test_fifo_cursor_rotates_and_wraps():
    frames = full_table(1, 2, 3)
    policy = FIFOReplacement()
    assert [policy.select_victim(frames) for _ in range(5)] == [0, 1, 2, 0, 1]


def test_fifo_ignores_recency():
    frames = full_table(1, 2, 3)
    frames.touch(0, 100, False, WritePolicy.WRITE_THROUGH)
    assert FIFOReplacement().select_victim(frames) == 0


def test_lru_picks_smallest_last_used():
    frames = full_table(1, 2, 3)
    frames.touch(0, 10, False, WritePolicy.WRITE_THROUGH)
    assert LRUReplacement().select_victim(frames) == 1


def test_lru_ties_go_to_lowest_index():
    frames = full_table(1, 2, 3)
    for i in range(3):
        frames[i].last_used = 7
    assert LRUReplacement().select_victim(frames) == 0


def test_clock_sweeps_all_set_bits_once():
    frames = full_table(1, 2, 3)
    policy = ClockReplacement()
    assert policy.select_victim(frames) == 0
    assert [f.referenced for f in frames.frames] == [False, False, False]
    assert policy.hand == 1


def test_clock_skips_referenced_frames():
    frames = full_table(1, 2, 3)
    frames[0].referenced = True
    frames[1].referenced = False
    frames[2].referenced = True
    policy = ClockReplacement()
    assert policy.select_victim(frames) == 1
    assert frames[0].referenced is False
    assert frames[2].referenced is True
    assert policy.hand == 2


def test_clock_hand_wraps():
    frames = full_table(1, 2, 3)
    for frame in frames.frames:
        frame.referenced = False
    policy = ClockReplacement()
    policy.hand = 2
    assert policy.select_victim(frames) == 2
    assert policy.hand == 0
