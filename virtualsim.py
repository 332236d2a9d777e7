#!/usr/bin/env python3
"""
Virtual Memory Simulator
Implements the frame table, TLB, page replacement policies (FIFO, LRU, CLOCK)
and the access engine that ties them together one trace access at a time.
"""

import logging
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)

PAGE_SIZE = 4096
DEFAULT_NUM_FRAMES = 3

TLB_LATENCY = 1.0
MEM_LATENCY = 100.0
DISK_LATENCY = 10000000.0


class WritePolicy:
    """Write policies understood by the frame table"""
    WRITE_THROUGH = "Write-Through"
    WRITE_BACK = "Write-Back"


class Outcome:
    """How a single access was resolved"""
    TLB_HIT = "TLB_HIT"
    HIT = "HIT"
    PAGE_FAULT = "PAGE_FAULT"


class Frame:
    """Represents a physical memory frame"""

    def __init__(self):
        self.occupant: Optional[int] = None
        self.last_used = 0
        self.referenced = False
        self.dirty = False

    def __repr__(self):
        return (f"Frame(occupant={self.occupant}, last_used={self.last_used}, "
                f"referenced={self.referenced}, dirty={self.dirty})")


class FrameTable:
    """Fixed set of physical frames plus per-frame replacement metadata"""

    def __init__(self, num_frames: int = DEFAULT_NUM_FRAMES):
        if num_frames <= 0:
            raise ValueError("Number of frames must be > 0")
        self.num_frames = num_frames
        self.frames = [Frame() for _ in range(num_frames)]

    def __len__(self) -> int:
        return self.num_frames

    def __getitem__(self, frame_index: int) -> Frame:
        return self.frames[frame_index]

    def lookup(self, vpn: int) -> Optional[int]:
        """Return the index of the frame holding vpn, or None"""
        for i, frame in enumerate(self.frames):
            if frame.occupant == vpn:
                return i
        return None

    def find_empty(self) -> Optional[int]:
        for i, frame in enumerate(self.frames):
            if frame.occupant is None:
                return i
        return None

    def touch(self, frame_index: int, tick: int, is_write: bool, write_policy: str):
        """Record a use of the frame: recency, reference bit and dirty bit"""
        frame = self.frames[frame_index]
        frame.last_used = tick
        frame.referenced = True
        if is_write and write_policy == WritePolicy.WRITE_BACK:
            frame.dirty = True

    def install(self, frame_index: int, vpn: int, tick: int, is_write: bool, write_policy: str):
        """Load vpn into a free or just-evicted frame"""
        frame = self.frames[frame_index]
        frame.occupant = vpn
        frame.referenced = False
        frame.dirty = False
        self.touch(frame_index, tick, is_write, write_policy)

    def occupants(self) -> Tuple[Optional[int], ...]:
        return tuple(frame.occupant for frame in self.frames)


class TLBEntry:
    """Translation Lookaside Buffer entry"""

    def __init__(self):
        self.valid = False
        self.vpn = 0
        self.frame_index = 0
        self.last_used = 0

    def __repr__(self):
        if not self.valid:
            return "TLB(-)"
        return f"TLB({self.vpn}->{self.frame_index})"


class TLB:
    """Translation Lookaside Buffer with LRU eviction; capacity 0 disables it"""

    def __init__(self, capacity: int = 0):
        if capacity < 0:
            raise ValueError("TLB size must be >= 0")
        self.capacity = capacity
        self.entries = [TLBEntry() for _ in range(capacity)]

    @property
    def enabled(self) -> bool:
        return self.capacity > 0

    def lookup(self, vpn: int, tick: int) -> Optional[int]:
        """Look up vpn, return frame index on a hit and refresh its recency"""
        for entry in self.entries:
            if entry.valid and entry.vpn == vpn:
                entry.last_used = tick
                return entry.frame_index
        return None

    def insert(self, vpn: int, frame_index: int, tick: int):
        """Update TLB with new vpn->frame mapping"""
        if not self.enabled:
            return

        # Already cached: refresh in place
        for entry in self.entries:
            if entry.valid and entry.vpn == vpn:
                entry.frame_index = frame_index
                entry.last_used = tick
                return

        slot = None
        for i, entry in enumerate(self.entries):
            if not entry.valid:
                slot = i
                break

        if slot is None:
            # Remove least recently used
            slot = 0
            for i in range(1, self.capacity):
                if self.entries[i].last_used < self.entries[slot].last_used:
                    slot = i

        entry = self.entries[slot]
        entry.valid = True
        entry.vpn = vpn
        entry.frame_index = frame_index
        entry.last_used = tick

    def invalidate(self, vpn: int):
        for entry in self.entries:
            if entry.valid and entry.vpn == vpn:
                entry.valid = False

    def mappings(self) -> List[Tuple[int, int]]:
        return [(e.vpn, e.frame_index) for e in self.entries if e.valid]


class ReplacementPolicy:
    """Base class for victim selection over a full frame table"""

    def select_victim(self, frames: FrameTable) -> int:
        """Return the index of the frame to evict"""
        raise NotImplementedError


class FIFOReplacement(ReplacementPolicy):
    """First-In-First-Out: a rotating cursor, blind to hits"""

    def __init__(self):
        self.cursor = 0

    def select_victim(self, frames: FrameTable) -> int:
        victim = self.cursor
        self.cursor = (self.cursor + 1) % len(frames)
        return victim


class LRUReplacement(ReplacementPolicy):
    """Least Recently Used: smallest last_used, lowest index on ties"""

    def select_victim(self, frames: FrameTable) -> int:
        victim = 0
        for i in range(1, len(frames)):
            if frames[i].last_used < frames[victim].last_used:
                victim = i
        return victim


class ClockReplacement(ReplacementPolicy):
    """
    Second-chance CLOCK. Referenced frames under the hand get their bit
    cleared and are skipped; the hand is kept between faults.
    """

    def __init__(self):
        self.hand = 0

    def select_victim(self, frames: FrameTable) -> int:
        n = len(frames)
        # Terminates within two sweeps: the first clears every bit it passes
        while True:
            frame = frames[self.hand]
            if not frame.referenced:
                victim = self.hand
                self.hand = (self.hand + 1) % n
                return victim
            frame.referenced = False
            self.hand = (self.hand + 1) % n


POLICIES = {
    "FIFO": FIFOReplacement,
    "LRU": LRUReplacement,
    "CLOCK": ClockReplacement,
}


def make_policy(name: str) -> ReplacementPolicy:
    """Build a fresh replacement policy by name (case-insensitive)"""
    try:
        return POLICIES[name.upper()]()
    except KeyError:
        raise ValueError(f"Algorithm '{name}' not found") from None


class SimulatorConfig:
    """Run configuration consumed by the engine"""

    def __init__(self, algorithm: str = "FIFO", num_frames: int = DEFAULT_NUM_FRAMES,
                 tlb_size: int = 0, write_policy: str = WritePolicy.WRITE_THROUGH):
        algorithm = algorithm.upper()
        if algorithm not in POLICIES:
            raise ValueError(f"Algorithm '{algorithm}' not found")
        if num_frames <= 0:
            raise ValueError("Number of frames must be > 0")
        if tlb_size < 0:
            raise ValueError("TLB size must be >= 0")
        if write_policy not in (WritePolicy.WRITE_THROUGH, WritePolicy.WRITE_BACK):
            raise ValueError(f"Unknown write policy '{write_policy}'")
        self.algorithm = algorithm
        self.num_frames = num_frames
        self.tlb_size = tlb_size
        self.write_policy = write_policy

    def __repr__(self):
        return (f"SimulatorConfig(algorithm={self.algorithm!r}, num_frames={self.num_frames}, "
                f"tlb_size={self.tlb_size}, write_policy={self.write_policy!r})")


class Statistics:
    """Run counters and the rates derived from them"""

    def __init__(self):
        self.reads = 0
        self.writes = 0
        self.page_faults = 0
        self.tlb_hits = 0
        self.tlb_misses = 0
        self.write_backs = 0

    @property
    def total_accesses(self) -> int:
        return self.reads + self.writes

    @property
    def fault_rate(self) -> Optional[float]:
        if self.total_accesses == 0:
            return None
        return self.page_faults / self.total_accesses

    @property
    def hit_rate(self) -> Optional[float]:
        fault_rate = self.fault_rate
        return None if fault_rate is None else 1.0 - fault_rate

    @property
    def tlb_hit_rate(self) -> Optional[float]:
        total = self.tlb_hits + self.tlb_misses
        return self.tlb_hits / total if total > 0 else None

    @property
    def amat(self) -> Optional[float]:
        """Approximate memory access time; needs at least one TLB lookup"""
        tlb_hit_rate = self.tlb_hit_rate
        if tlb_hit_rate is None:
            return None
        fault_rate = self.fault_rate or 0.0
        base = tlb_hit_rate * TLB_LATENCY + (1.0 - tlb_hit_rate) * MEM_LATENCY
        return base + fault_rate * DISK_LATENCY

    def as_dict(self, config: SimulatorConfig) -> Dict:
        stats = {
            'algorithm': config.algorithm,
            'write_policy': config.write_policy,
            'num_frames': config.num_frames,
            'reads': self.reads,
            'writes': self.writes,
            'total_accesses': self.total_accesses,
            'page_faults': self.page_faults,
            'hit_rate': self.hit_rate,
            'fault_rate': self.fault_rate,
            'write_backs': self.write_backs,
        }
        if config.tlb_size > 0:
            stats.update({
                'tlb_entries': config.tlb_size,
                'tlb_hits': self.tlb_hits,
                'tlb_misses': self.tlb_misses,
                'tlb_hit_rate': self.tlb_hit_rate,
                'amat': self.amat,
            })
        return stats


class AccessEvent:
    """What happened on one access, for the reporting layer"""

    def __init__(self, op: str, address: int, vpn: int, outcome: str, frame_index: int,
                 frames: Tuple[Optional[int], ...], tick: int, tlb_miss: bool = False,
                 evicted_vpn: Optional[int] = None, wrote_back: bool = False):
        self.op = op
        self.address = address
        self.vpn = vpn
        self.outcome = outcome
        self.frame_index = frame_index
        self.frames = frames
        self.tick = tick
        self.tlb_miss = tlb_miss
        self.evicted_vpn = evicted_vpn
        self.wrote_back = wrote_back

    def __repr__(self):
        return (f"AccessEvent({self.op} 0x{self.address:x} vpn={self.vpn} "
                f"{self.outcome} frame={self.frame_index})")


class MemoryAccessEngine:
    """Main virtual memory simulator: TLB, then frame table, then replacement"""

    def __init__(self, config: Optional[SimulatorConfig] = None):
        self.config = config or SimulatorConfig()
        # Tables are only published once all of them are built
        frames = FrameTable(self.config.num_frames)
        tlb = TLB(self.config.tlb_size)
        policy = make_policy(self.config.algorithm)
        self.frames = frames
        self.tlb = tlb
        self.policy = policy
        self.stats = Statistics()
        self.tick = 0

    def access_memory(self, op: str, address: int) -> Optional[AccessEvent]:
        """Process one trace access; returns None for ops other than R/W"""
        self.tick += 1
        tick = self.tick

        if op == 'R':
            self.stats.reads += 1
            is_write = False
        elif op == 'W':
            self.stats.writes += 1
            is_write = True
        else:
            return None

        vpn = address // PAGE_SIZE
        write_policy = self.config.write_policy

        # Check TLB first
        tlb_miss = False
        if self.tlb.enabled:
            frame_index = self.tlb.lookup(vpn, tick)
            if frame_index is not None:
                self.stats.tlb_hits += 1
                self.frames.touch(frame_index, tick, is_write, write_policy)
                return AccessEvent(op, address, vpn, Outcome.TLB_HIT, frame_index,
                                   self.frames.occupants(), tick)
            self.stats.tlb_misses += 1
            tlb_miss = True

        # TLB miss, check frame table
        frame_index = self.frames.lookup(vpn)
        if frame_index is not None:
            self.frames.touch(frame_index, tick, is_write, write_policy)
            self.tlb.insert(vpn, frame_index, tick)
            return AccessEvent(op, address, vpn, Outcome.HIT, frame_index,
                               self.frames.occupants(), tick, tlb_miss=tlb_miss)

        # Page fault
        self.stats.page_faults += 1
        victim = self.frames.find_empty()
        if victim is None:
            victim = self.policy.select_victim(self.frames)

        evicted_vpn = self.frames[victim].occupant
        wrote_back = False
        if evicted_vpn is not None:
            self.tlb.invalidate(evicted_vpn)
            frame = self.frames[victim]
            if write_policy == WritePolicy.WRITE_BACK and frame.dirty:
                self.stats.write_backs += 1
                frame.dirty = False
                wrote_back = True
            logger.debug("tick %d: evicting vpn %d from frame %d%s", tick, evicted_vpn,
                         victim, " (write-back)" if wrote_back else "")

        self.frames.install(victim, vpn, tick, is_write, write_policy)
        self.tlb.insert(vpn, victim, tick)
        return AccessEvent(op, address, vpn, Outcome.PAGE_FAULT, victim,
                           self.frames.occupants(), tick, tlb_miss=tlb_miss,
                           evicted_vpn=evicted_vpn, wrote_back=wrote_back)

    def iter_trace(self, accesses: Iterable[Tuple[str, int]]) -> Iterator[AccessEvent]:
        for op, address in accesses:
            event = self.access_memory(op, address)
            if event is not None:
                yield event

    def simulate_trace(self, accesses: Iterable[Tuple[str, int]]) -> List[AccessEvent]:
        """Simulate a complete trace and return the per-access events"""
        return list(self.iter_trace(accesses))

    def tlb_is_coherent(self) -> bool:
        """True when every cached translation points at a frame holding that vpn"""
        for vpn, frame_index in self.tlb.mappings():
            if not 0 <= frame_index < len(self.frames):
                return False
            if self.frames[frame_index].occupant != vpn:
                return False
        return True

    def get_statistics(self) -> Dict:
        """Get simulation statistics"""
        return self.stats.as_dict(self.config)

