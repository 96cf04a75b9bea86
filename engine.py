# engine.py

from collections import deque, OrderedDict
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Type


HIT = "HIT"
FAULT = "FAULT"


class InvalidFrameCount(ValueError):
    """Raised when a simulation is requested with fewer than one frame."""


class UnknownAlgorithm(ValueError):
    """Raised when the dispatcher is given an id it does not know."""


class ReplacementPolicy:
    """
    Identifiers of the supported page replacement algorithms.

    FIFO:          First-In-First-Out - replaces the oldest page in memory
    LRU:           Least Recently Used - replaces the page not used for longest time
    OPTIMAL:       Belady's algorithm - replaces the page used farthest in the future
    SECOND_CHANCE: Clock - FIFO order, but pages with their reference bit set are skipped once
    LFU:           Least Frequently Used - replaces the page with the lowest access count
    """
    FIFO = "fifo"
    LRU = "lru"
    OPTIMAL = "optimal"
    SECOND_CHANCE = "secondChance"
    LFU = "lfu"

    ALL = (FIFO, LRU, OPTIMAL, SECOND_CHANCE, LFU)


# -----------------------------
# Trace records
# -----------------------------

def hit_percentage(hits: int, total: int) -> float:
    """
    Percentage of hits, rounded half-up to one decimal.

    An empty run has no defined ratio; it is reported as 0.0.
    """
    if total == 0:
        return 0.0
    ratio = Decimal(hits / total * 100)
    return float(ratio.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class Step:
    """
    State of the simulation right after one page reference was processed.

    Attributes:
        step_number (int): 1-based position of the reference in the sequence
        page (int): The referenced page
        frames (Tuple[int, ...]): Frame contents after this reference, by slot
        aux (Tuple): Policy bookkeeping after this reference (queue, recency
            list, frame order, reference bits or (page, frequency) pairs)
        result (str): HIT or FAULT
        action (str): Human readable description of what happened
        faults (int): Faults so far, including this step
        hits (int): Hits so far, including this step
        evicted_page (Optional[int]): Page displaced by this step, None if none
    """
    step_number: int
    page: int
    frames: Tuple[int, ...]
    aux: Tuple[Any, ...]
    result: str
    action: str
    faults: int
    hits: int
    evicted_page: Optional[int] = None

    @property
    def is_hit(self) -> bool:
        return self.result == HIT

    @property
    def hit_ratio(self) -> float:
        """Hit ratio over the references seen so far."""
        return hit_percentage(self.hits, self.step_number)


@dataclass(frozen=True)
class SimulationResult:
    algorithm: str
    frame_count: int
    steps: Tuple[Step, ...]
    total_faults: int
    total_hits: int
    total_references: int
    hit_ratio: float

    def event_log(self, upto: Optional[int] = None) -> List[str]:
        """Action descriptions of the first `upto` steps (all steps by default)."""
        steps = self.steps if upto is None else self.steps[:upto]
        return [step.action for step in steps]


class _Trace:
    # Accumulates steps and running counters for a single run.

    def __init__(self):
        self.steps: List[Step] = []
        self.faults = 0
        self.hits = 0

    def record(self, page: int, hit: bool, frames: Iterable[int], aux: Iterable[Any],
               action: str, evicted_page: Optional[int] = None):
        if hit:
            self.hits += 1
        else:
            self.faults += 1
        self.steps.append(Step(
            step_number=len(self.steps) + 1,
            page=page,
            frames=tuple(frames),
            aux=tuple(aux),
            result=HIT if hit else FAULT,
            action=action,
            faults=self.faults,
            hits=self.hits,
            evicted_page=evicted_page,
        ))

    def finish(self, algorithm: str, frame_count: int) -> SimulationResult:
        total = len(self.steps)
        return SimulationResult(
            algorithm=algorithm,
            frame_count=frame_count,
            steps=tuple(self.steps),
            total_faults=self.faults,
            total_hits=self.hits,
            total_references=total,
            hit_ratio=hit_percentage(self.hits, total),
        )


# =============================================================================
# SIMULATORS
# =============================================================================

class PageReplacementSimulator:
    """
    Base class for the page replacement simulators.

    A simulator is configured with a frame count and replays a page reference
    sequence from scratch on every call to `simulate`. All bookkeeping
    (frames, queues, bits, counters) lives in local variables of that call, so
    one simulator instance can serve any number of independent runs.

    Attributes:
        name (str): The ReplacementPolicy identifier of the algorithm
        frame_count (int): Number of physical frames available
    """
    name = ""

    def __init__(self, frame_count: int):
        """
        Args:
            frame_count (int): Number of physical frames, at least 1

        Raises:
            InvalidFrameCount: If frame_count is not an integer >= 1
        """
        if isinstance(frame_count, bool) or not isinstance(frame_count, int) or frame_count < 1:
            raise InvalidFrameCount(f"Frame count must be a positive integer, got {frame_count!r}")
        self.frame_count = frame_count

    def simulate(self, pages: Iterable[int]) -> SimulationResult:
        """
        Run the algorithm over a page reference sequence.

        Args:
            pages (Iterable[int]): Page references in request order, may be empty

        Returns:
            SimulationResult: One step per reference plus summary counters
        """
        raise NotImplementedError


class FIFOSimulator(PageReplacementSimulator):
    name = ReplacementPolicy.FIFO

    def simulate(self, pages):
        trace = _Trace()
        frames: List[int] = []
        queue: deque = deque()  # arrival order, oldest at the left

        for page in pages:
            if page in frames:
                trace.record(page, True, frames, queue, f"HIT: Page {page} already in memory")
                continue

            if len(frames) < self.frame_count:
                frames.append(page)
                queue.append(page)
                trace.record(page, False, frames, queue,
                             f"INSERT: Page {page} inserted into frame {len(frames) - 1}")
                continue

            victim = queue.popleft()
            slot = frames.index(victim)
            frames[slot] = page
            queue.append(page)
            trace.record(page, False, frames, queue,
                         f"FAULT: Page {page} replaced page {victim} in frame {slot}", victim)

        return trace.finish(self.name, self.frame_count)


class LRUSimulator(PageReplacementSimulator):
    """
    OrderedDict keeps the recency order; accessed pages move to the end so the
    least recently used page is always first.
    """
    name = ReplacementPolicy.LRU

    def simulate(self, pages):
        trace = _Trace()
        frames: List[int] = []
        recency: OrderedDict = OrderedDict()

        for page in pages:
            if page in recency:
                recency.move_to_end(page)
                trace.record(page, True, frames, recency,
                             f"HIT: Page {page} accessed, moved to most recently used")
                continue

            if len(frames) < self.frame_count:
                frames.append(page)
                recency[page] = None
                trace.record(page, False, frames, recency,
                             f"INSERT: Page {page} inserted into frame {len(frames) - 1}")
                continue

            victim, _ = recency.popitem(last=False)
            frames[frames.index(victim)] = page
            recency[page] = None
            trace.record(page, False, frames, recency,
                         f"FAULT: Page {page} replaced least recently used page {victim}", victim)

        return trace.finish(self.name, self.frame_count)


def _next_use(pages: Sequence[int], start: int, page: int) -> Optional[int]:
    # Distance from `start` to the next reference of `page`, None if never again.
    for offset in range(start, len(pages)):
        if pages[offset] == page:
            return offset - start
    return None


class OptimalSimulator(PageReplacementSimulator):
    name = ReplacementPolicy.OPTIMAL

    def _choose_victim(self, frames: List[int], pages: Sequence[int], position: int) -> int:
        """
        Pick the slot to evict when all frames are full.

        Frames are scanned left to right without stopping early. A page that is
        never referenced again always wins, and the last such page in the scan
        is the one chosen. Otherwise the page whose next use is strictly the
        farthest wins, ties going to the earlier frame.
        """
        victim_slot = 0
        farthest = -1
        unused_found = False

        for slot, resident in enumerate(frames):
            distance = _next_use(pages, position + 1, resident)
            if distance is None:
                victim_slot = slot
                unused_found = True
            elif not unused_found and distance > farthest:
                farthest = distance
                victim_slot = slot

        return victim_slot

    def simulate(self, pages):
        pages = list(pages)
        trace = _Trace()
        frames: List[int] = []

        for position, page in enumerate(pages):
            if page in frames:
                trace.record(page, True, frames, frames, f"HIT: Page {page} already in memory")
                continue

            if len(frames) < self.frame_count:
                frames.append(page)
                trace.record(page, False, frames, frames,
                             f"INSERT: Page {page} inserted into frame {len(frames) - 1}")
                continue

            slot = self._choose_victim(frames, pages, position)
            victim = frames[slot]
            frames[slot] = page
            trace.record(page, False, frames, frames,
                         f"FAULT: Page {page} replaced page {victim} (optimal choice)", victim)

        return trace.finish(self.name, self.frame_count)


class SecondChanceSimulator(PageReplacementSimulator):
    """
    Clock algorithm. Each frame carries a reference bit, set on a hit. The
    hand sweeps the frames circularly, clearing set bits, and evicts the first
    frame whose bit is already clear.
    """
    name = ReplacementPolicy.SECOND_CHANCE

    def simulate(self, pages):
        trace = _Trace()
        frames: List[int] = []
        bits: List[int] = []
        pointer = 0

        for page in pages:
            if page in frames:
                bits[frames.index(page)] = 1
                trace.record(page, True, frames, bits,
                             f"HIT: Page {page} found, reference bit set to 1")
                continue

            if len(frames) < self.frame_count:
                frames.append(page)
                bits.append(0)
                trace.record(page, False, frames, bits,
                             f"INSERT: Page {page} inserted into frame {len(frames) - 1}")
                continue

            while bits[pointer] == 1:
                bits[pointer] = 0
                pointer = (pointer + 1) % self.frame_count

            victim = frames[pointer]
            frames[pointer] = page
            bits[pointer] = 0
            pointer = (pointer + 1) % self.frame_count
            trace.record(page, False, frames, bits,
                         f"FAULT: Page {page} replaced page {victim} (second chance given)", victim)

        return trace.finish(self.name, self.frame_count)


class LFUSimulator(PageReplacementSimulator):
    name = ReplacementPolicy.LFU

    def simulate(self, pages):
        trace = _Trace()
        frames: List[int] = []
        frequency: Dict[int, int] = {}

        def counts():
            return [(resident, frequency[resident]) for resident in frames]

        for page in pages:
            if page in frames:
                frequency[page] = frequency.get(page, 0) + 1
                trace.record(page, True, frames, counts(),
                             f"HIT: Page {page} frequency increased to {frequency[page]}")
                continue

            if len(frames) < self.frame_count:
                frames.append(page)
                frequency[page] = 1
                trace.record(page, False, frames, counts(),
                             f"INSERT: Page {page} inserted into frame {len(frames) - 1}")
                continue

            # strict < keeps the first frame among equally rare pages
            victim = frames[0]
            lowest = float("inf")
            for resident in frames:
                if frequency.get(resident, 0) < lowest:
                    lowest = frequency.get(resident, 0)
                    victim = resident

            frames[frames.index(victim)] = page
            del frequency[victim]
            frequency[page] = 1
            trace.record(page, False, frames, counts(),
                         f"FAULT: Page {page} replaced least frequently used page {victim}", victim)

        return trace.finish(self.name, self.frame_count)


# -----------------------------
# Dispatcher
# -----------------------------

SIMULATORS: Dict[str, Type[PageReplacementSimulator]] = {
    ReplacementPolicy.FIFO: FIFOSimulator,
    ReplacementPolicy.LRU: LRUSimulator,
    ReplacementPolicy.OPTIMAL: OptimalSimulator,
    ReplacementPolicy.SECOND_CHANCE: SecondChanceSimulator,
    ReplacementPolicy.LFU: LFUSimulator,
}


def get_simulator(algorithm: str, frame_count: int) -> PageReplacementSimulator:
    if not isinstance(algorithm, str) or algorithm not in SIMULATORS:
        raise UnknownAlgorithm(
            f"Unknown algorithm {algorithm!r}, expected one of: {', '.join(ReplacementPolicy.ALL)}"
        )
    return SIMULATORS[algorithm](frame_count)


def run(algorithm: str, pages: Iterable[int], frame_count: int) -> SimulationResult:
    """
    Simulate one replacement algorithm over a page reference sequence.

    Args:
        algorithm (str): One of the ReplacementPolicy identifiers
        pages (Iterable[int]): Page references in request order
        frame_count (int): Number of physical frames, at least 1

    Returns:
        SimulationResult: The full step trace and summary counters

    Raises:
        UnknownAlgorithm: If algorithm is not a ReplacementPolicy identifier
        InvalidFrameCount: If frame_count is below 1
    """
    return get_simulator(algorithm, frame_count).simulate(pages)


def compare(pages: Iterable[int], frame_count: int,
            algorithms: Iterable[str] = ReplacementPolicy.ALL) -> Dict[str, SimulationResult]:
    """Run several algorithms over the same sequence, keyed by algorithm id."""
    pages = list(pages)
    return {algorithm: run(algorithm, pages, frame_count) for algorithm in algorithms}
