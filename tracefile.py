"""
Trace input: parsing "<op> <hex-address>" lines and generating synthetic traces.
"""

import logging
import random
import string
from typing import Iterable, Iterator, List, Optional, Tuple

from virtualsim import PAGE_SIZE

logger = logging.getLogger(__name__)


def parse_trace_line(line: str) -> Optional[Tuple[str, int]]:
    """
    Parse one trace line into (op, address).
    Returns None for blank or malformed lines. The op is the first character
    of the first token; deciding whether it is a known op is left to the engine.
    """
    parts = line.split()
    if len(parts) != 2:
        return None
    op_token, addr_token = parts
    digits = addr_token[2:] if addr_token[:2].lower() == "0x" else addr_token
    if not digits or any(c not in string.hexdigits for c in digits):
        return None
    return op_token[0], int(digits, 16)


def read_trace(lines: Iterable[str], source: str = "<trace>") -> Iterator[Tuple[str, int]]:
    """Yield (op, address) pairs from trace lines, skipping malformed ones"""
    for lineno, line in enumerate(lines, 1):
        access = parse_trace_line(line)
        if access is None:
            if line.strip():
                logger.debug("%s:%d: skipping malformed line %r", source, lineno, line.rstrip())
            continue
        yield access


def generate_random_trace(length: int, page_range: int, locality_factor: float = 0.7,
                          write_ratio: float = 0.3,
                          seed: Optional[int] = None) -> List[Tuple[str, int]]:
    """Generate a trace with some locality of reference"""
    rng = random.Random(seed)
    trace = []
    current_page = rng.randint(0, page_range - 1)

    for _ in range(length):
        if rng.random() < locality_factor:
            # Stay in locality (within +-2 pages)
            offset = rng.choice([-2, -1, 0, 1, 2])
            current_page = max(0, min(page_range - 1, current_page + offset))
        else:
            # Jump to random page
            current_page = rng.randint(0, page_range - 1)

        op = 'W' if rng.random() < write_ratio else 'R'
        address = current_page * PAGE_SIZE + rng.randint(0, PAGE_SIZE - 1)
        trace.append((op, address))

    return trace

