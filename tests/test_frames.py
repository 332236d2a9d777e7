import pytest

from virtualsim import TLB, FrameTable, WritePolicy


def test_frame_table_rejects_non_positive_size():
    with pytest.raises(ValueError):
        FrameTable(0)
    with pytest.raises(ValueError):
        FrameTable(-2)


def test_frame_table_starts_empty():
    frames = FrameTable(3)
    assert frames.occupants() == (None, None, None)
    assert frames.find_empty() == 0
    assert frames.lookup(0) is None


def test_lookup_and_find_empty_scan_left_to_right():
    frames = FrameTable(4)
    frames.install(1, 7, 1, False, WritePolicy.WRITE_THROUGH)
    assert frames.lookup(7) == 1
    assert frames.find_empty() == 0
    frames.install(0, 8, 2, False, WritePolicy.WRITE_THROUGH)
    assert frames.find_empty() == 2


def test_touch_sets_dirty_only_for_write_back_writes():
    frames = FrameTable(1)
    frames.install(0, 5, 1, True, WritePolicy.WRITE_THROUGH)
    assert not frames[0].dirty
    frames.touch(0, 2, False, WritePolicy.WRITE_BACK)
    assert not frames[0].dirty
    frames.touch(0, 3, True, WritePolicy.WRITE_BACK)
    assert frames[0].dirty
    assert frames[0].last_used == 3
    assert frames[0].referenced


def test_install_resets_bits_before_touching():
    frames = FrameTable(1)
    frames.install(0, 5, 1, True, WritePolicy.WRITE_BACK)
    frames[0].referenced = False
    frames.install(0, 6, 9, False, WritePolicy.WRITE_BACK)
    frame = frames[0]
    assert frame.occupant == 6
    assert frame.last_used == 9
    assert frame.referenced
    assert not frame.dirty


class TestTLB:

    def test_negative_capacity_rejected(self):
        with pytest.raises(ValueError):
            TLB(-1)

    def test_disabled_tlb_is_a_no_op(self):
        tlb = TLB(0)
        assert not tlb.enabled
        tlb.insert(1, 0, 1)
        tlb.invalidate(1)
        assert tlb.lookup(1, 2) is None
        assert tlb.mappings() == []

    def test_insert_fills_empty_slots_in_order(self):
        tlb = TLB(3)
        tlb.insert(10, 0, 1)
        tlb.insert(11, 1, 2)
        assert [e.vpn for e in tlb.entries if e.valid] == [10, 11]
        assert tlb.entries[2].valid is False

    def test_insert_existing_vpn_overwrites_in_place(self):
        tlb = TLB(2)
        tlb.insert(10, 0, 1)
        tlb.insert(10, 2, 5)
        assert tlb.mappings() == [(10, 2)]
        assert tlb.entries[0].last_used == 5

    def test_full_tlb_evicts_least_recently_used(self):
        tlb = TLB(2)
        tlb.insert(10, 0, 1)
        tlb.insert(11, 1, 2)
        # Hit refreshes 10, so 11 is now oldest
        assert tlb.lookup(10, 3) == 0
        tlb.insert(12, 2, 4)
        assert sorted(tlb.mappings()) == [(10, 0), (12, 2)]

    def test_eviction_ties_go_to_lowest_index(self):
        tlb = TLB(3)
        tlb.insert(10, 0, 4)
        tlb.insert(11, 1, 4)
        tlb.insert(12, 2, 4)
        tlb.insert(13, 0, 5)
        assert tlb.entries[0].vpn == 13
        assert [e.vpn for e in tlb.entries] == [13, 11, 12]

    def test_invalidate_frees_the_slot(self):
        tlb = TLB(2)
        tlb.insert(10, 0, 1)
        tlb.insert(11, 1, 2)
        tlb.invalidate(10)
        assert tlb.lookup(10, 3) is None
        tlb.insert(12, 0, 4)
        assert tlb.entries[0].vpn == 12
        assert tlb.mappings() == [(12, 0), (11, 1)]
