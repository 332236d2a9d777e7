"""Text rendering of access events and run statistics."""

from typing import Dict, List, Optional, Tuple

from virtualsim import AccessEvent, Outcome


def format_frames(frames: Tuple[Optional[int], ...]) -> str:
    cells = "".join(" -" if vpn is None else f" {vpn}" for vpn in frames)
    return f"Frames: [{cells} ]"


def format_event(event: AccessEvent) -> List[str]:
    """Lines printed for one access, ending with the frame snapshot"""
    prefix = f"Operation: {event.op} | Address: 0x{event.address:x} | VPN: {event.vpn}"
    lines = []
    if event.outcome == Outcome.TLB_HIT:
        lines.append(f"{prefix} -> TLB HIT (frame {event.frame_index})")
    else:
        if event.tlb_miss:
            lines.append(" -> TLB MISS")
        if event.outcome == Outcome.HIT:
            lines.append(f"{prefix} -> HIT")
        else:
            lines.append(f"{prefix} -> PAGE FAULT")
    lines.append(format_frames(event.frames))
    return lines


def _percent(rate: float) -> str:
    return f"{rate * 100.0:.2f}%"


def format_statistics(stats: Dict) -> List[str]:
    """The end-of-run stats block"""
    lines = [
        "--- Stats ---",
        f"Algorithm: {stats['algorithm']}",
        f"Write policy: {stats['write_policy']}",
        f"Frames: {stats['num_frames']}",
        f"Reads: {stats['reads']}",
        f"Writes: {stats['writes']}",
        f"Total accesses: {stats['total_accesses']}",
        f"Total page faults: {stats['page_faults']}",
    ]
    if stats['fault_rate'] is not None:
        lines.append(f"Memory hit rate: {_percent(stats['hit_rate'])}")
        lines.append(f"Page fault rate: {_percent(stats['fault_rate'])}")

    if 'tlb_entries' in stats:
        lines.append(f"TLB entries: {stats['tlb_entries']}")
        lines.append(f"TLB hits: {stats['tlb_hits']}")
        lines.append(f"TLB misses: {stats['tlb_misses']}")
        if stats['tlb_hit_rate'] is not None:
            lines.append(f"TLB hit rate: {_percent(stats['tlb_hit_rate'])}")
            lines.append(f"Approx. AMAT: {stats['amat']:.2f} cycles")

    lines.append(f"Write-backs (dirty evictions): {stats['write_backs']}")
    return lines


def format_comparison(results: Dict[str, Dict]) -> List[str]:
    """Summary table, one row per algorithm"""
    lines = [
        "=== Algorithm Comparison Summary ===",
        f"{'Algorithm':<10} {'Page Faults':<12} {'Fault Rate':<12} {'TLB Hit Rate':<13} {'Write-backs':<12}",
        "-" * 62,
    ]
    for name, stats in results.items():
        fault_rate = stats['fault_rate']
        tlb_hit_rate = stats.get('tlb_hit_rate')
        fault_col = f"{fault_rate:.3f}" if fault_rate is not None else "n/a"
        tlb_col = f"{tlb_hit_rate:.3f}" if tlb_hit_rate is not None else "n/a"
        lines.append(f"{name:<10} {stats['page_faults']:<12} {fault_col:<12} "
                     f"{tlb_col:<13} {stats['write_backs']:<12}")
    return lines
