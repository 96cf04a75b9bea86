import random

import pytest

from engine import (
    FAULT,
    HIT,
    FIFOSimulator,
    InvalidFrameCount,
    LFUSimulator,
    LRUSimulator,
    OptimalSimulator,
    ReplacementPolicy,
    SecondChanceSimulator,
    UnknownAlgorithm,
    compare,
    hit_percentage,
    run,
)


SHORT = [1, 2, 3, 1, 2, 4]
TEXTBOOK = [7, 0, 1, 2, 0, 3, 0, 4, 2, 3, 0, 3, 2, 1, 2, 0, 1, 7, 0, 1]
BELADY = [1, 2, 3, 4, 1, 2, 5, 1, 2, 3, 4, 5]


# -----------------------------
# Shared scenario
# -----------------------------

@pytest.mark.parametrize("algorithm,evicted,final_frames", [
    (ReplacementPolicy.FIFO, 1, (4, 2, 3)),
    (ReplacementPolicy.LRU, 3, (1, 2, 4)),
    (ReplacementPolicy.OPTIMAL, 3, (1, 2, 4)),
    (ReplacementPolicy.SECOND_CHANCE, 3, (1, 2, 4)),
    (ReplacementPolicy.LFU, 3, (1, 2, 4)),
])
def test_short_scenario(algorithm, evicted, final_frames):
    result = run(algorithm, SHORT, 3)
    assert result.algorithm == algorithm
    assert result.frame_count == 3
    assert result.total_faults == 4
    assert result.total_hits == 2
    assert result.total_references == 6
    assert result.hit_ratio == 33.3
    assert [s.result for s in result.steps] == [FAULT, FAULT, FAULT, HIT, HIT, FAULT]
    assert result.steps[-1].evicted_page == evicted
    assert result.steps[-1].frames == final_frames
    # only the last step evicts
    assert [s.evicted_page for s in result.steps[:-1]] == [None] * 5


@pytest.mark.parametrize("algorithm,faults,final_frames", [
    (ReplacementPolicy.FIFO, 15, (7, 0, 1)),
    (ReplacementPolicy.LRU, 12, (1, 0, 7)),
    (ReplacementPolicy.OPTIMAL, 9, (7, 0, 1)),
])
def test_textbook_reference_string(algorithm, faults, final_frames):
    result = run(algorithm, TEXTBOOK, 3)
    assert result.total_faults == faults
    assert result.total_hits == len(TEXTBOOK) - faults
    assert result.steps[-1].frames == final_frames


def test_fifo_beladys_anomaly():
    assert run(ReplacementPolicy.FIFO, BELADY, 3).total_faults == 9
    assert run(ReplacementPolicy.FIFO, BELADY, 4).total_faults == 10


# -----------------------------
# Per-policy behavior
# -----------------------------

def test_fifo_queue_snapshot_and_actions():
    result = FIFOSimulator(3).simulate(SHORT)
    assert result.steps[2].aux == (1, 2, 3)
    assert result.steps[3].aux == (1, 2, 3)  # hits do not reorder
    assert result.steps[5].aux == (2, 3, 4)
    assert result.steps[0].action == "INSERT: Page 1 inserted into frame 0"
    assert result.steps[3].action == "HIT: Page 1 already in memory"
    assert result.steps[5].action == "FAULT: Page 4 replaced page 1 in frame 0"


def test_lru_recency_snapshot_and_actions():
    result = LRUSimulator(3).simulate(SHORT)
    assert result.steps[3].aux == (2, 3, 1)
    assert result.steps[4].aux == (3, 1, 2)
    assert result.steps[5].aux == (1, 2, 4)
    assert result.steps[3].action == "HIT: Page 1 accessed, moved to most recently used"
    assert result.steps[5].action == "FAULT: Page 4 replaced least recently used page 3"


def test_optimal_evicts_last_page_without_future_use():
    # pages 2 and 3 are never used again; the later frame (3) is evicted
    result = OptimalSimulator(3).simulate([1, 2, 3, 4, 1])
    assert result.steps[3].evicted_page == 3
    assert result.steps[3].frames == (1, 2, 4)
    assert result.steps[3].action == "FAULT: Page 4 replaced page 3 (optimal choice)"


def test_optimal_unused_page_beats_later_frames_with_future_use():
    result = OptimalSimulator(3).simulate([1, 2, 3, 4, 2, 3])
    assert result.steps[3].evicted_page == 1
    assert result.steps[3].frames == (4, 2, 3)


def test_optimal_evicts_farthest_next_use():
    result = OptimalSimulator(3).simulate([1, 2, 3, 4, 1, 2, 3])
    assert result.steps[3].evicted_page == 3
    assert result.steps[3].aux == result.steps[3].frames


def test_second_chance_sweep_wraps_around():
    result = SecondChanceSimulator(3).simulate([1, 2, 3, 1, 2, 3, 4, 5])
    assert result.steps[5].aux == (1, 1, 1)
    # every bit cleared, the hand wraps back to frame 0
    assert result.steps[6].evicted_page == 1
    assert result.steps[6].frames == (4, 2, 3)
    assert result.steps[6].aux == (0, 0, 0)
    # the hand now points at frame 1
    assert result.steps[7].evicted_page == 2
    assert result.steps[7].frames == (4, 5, 3)


def test_second_chance_skips_referenced_page():
    pages = [1, 2, 3, 4, 2, 5]
    clock = SecondChanceSimulator(3).simulate(pages)
    fifo = FIFOSimulator(3).simulate(pages)
    assert fifo.steps[-1].evicted_page == 2
    assert clock.steps[-1].evicted_page == 3
    assert clock.steps[-1].frames == (4, 2, 5)
    assert clock.steps[4].aux == (0, 1, 0)
    assert clock.steps[4].action == "HIT: Page 2 found, reference bit set to 1"
    assert clock.steps[-1].action == "FAULT: Page 5 replaced page 3 (second chance given)"


def test_lfu_ties_go_to_lowest_frame():
    result = LFUSimulator(3).simulate([1, 2, 3, 4, 5])
    assert result.steps[3].evicted_page == 1
    assert result.steps[3].frames == (4, 2, 3)
    # the freshly loaded page is again the first of the least used
    assert result.steps[4].evicted_page == 4
    assert result.steps[4].frames == (5, 2, 3)


def test_lfu_frequency_bookkeeping():
    result = LFUSimulator(3).simulate([1, 1, 2, 3, 4, 1])
    assert result.steps[1].action == "HIT: Page 1 frequency increased to 2"
    assert result.steps[4].evicted_page == 2
    assert result.steps[4].action == "FAULT: Page 4 replaced least frequently used page 2"
    assert result.steps[5].aux == ((1, 3), (4, 1), (3, 1))


def test_evicted_page_count_is_forgotten():
    # 2 reaches a count of 3, is evicted, and starts again at 1 on return
    result = LFUSimulator(2).simulate([1, 2, 2, 2, 3, 3, 3, 3, 1, 2])
    assert result.steps[4].evicted_page == 1
    assert result.steps[8].evicted_page == 2
    assert result.steps[8].aux == ((3, 4), (1, 1))
    assert result.steps[9].evicted_page == 1
    assert result.steps[9].aux == ((3, 4), (2, 1))


def test_single_frame():
    for algorithm in ReplacementPolicy.ALL:
        result = run(algorithm, [1, 1, 2, 1], 1)
        assert [s.frames for s in result.steps] == [(1,), (1,), (2,), (1,)]
        assert [s.evicted_page for s in result.steps] == [None, None, 1, 2]


# -----------------------------
# Invariants over random input
# -----------------------------

def _random_sequences():
    rng = random.Random(1234)
    return [[rng.randint(1, 8) for _ in range(rng.randint(1, 40))] for _ in range(25)]


@pytest.mark.parametrize("algorithm", ReplacementPolicy.ALL)
@pytest.mark.parametrize("frame_count", [1, 2, 3, 5])
def test_trace_invariants(algorithm, frame_count):
    for pages in _random_sequences():
        result = run(algorithm, pages, frame_count)
        assert len(result.steps) == len(pages)
        assert result.total_faults == result.steps[-1].faults
        assert result.total_hits == result.steps[-1].hits
        assert result.hit_ratio == hit_percentage(result.total_hits, len(pages))

        previous = ()
        for number, (page, step) in enumerate(zip(pages, result.steps), start=1):
            assert step.step_number == number
            assert step.page == page
            assert step.faults + step.hits == number
            assert step.is_hit == (page in previous)
            assert len(step.frames) <= frame_count
            assert len(step.frames) >= len(previous)
            assert page in step.frames
            assert len(set(step.frames)) == len(step.frames)
            if step.evicted_page is not None:
                assert len(previous) == frame_count
                assert step.evicted_page in previous
                assert step.evicted_page not in step.frames
            elif not step.is_hit:
                assert len(step.frames) == len(previous) + 1
            previous = step.frames


def test_fifo_evicts_longest_resident():
    for pages in _random_sequences():
        loaded_at = {}
        for step in run(ReplacementPolicy.FIFO, pages, 3).steps:
            if step.evicted_page is not None:
                oldest = min(loaded_at, key=loaded_at.get)
                assert step.evicted_page == oldest
                del loaded_at[step.evicted_page]
            if not step.is_hit:
                loaded_at[step.page] = step.step_number


def test_lru_evicts_least_recently_used():
    for pages in _random_sequences():
        last_used = {}
        resident = set()
        for step in run(ReplacementPolicy.LRU, pages, 3).steps:
            if step.evicted_page is not None:
                assert step.evicted_page == min(resident, key=last_used.get)
            resident = set(step.frames)
            last_used[step.page] = step.step_number


def test_optimal_victim_is_last_unused_else_farthest_next_use():
    for pages in _random_sequences():
        previous = ()
        for position, step in enumerate(run(ReplacementPolicy.OPTIMAL, pages, 3).steps):
            if step.evicted_page is not None:
                future = pages[position + 1:]
                unused = [p for p in previous if p not in future]
                if unused:
                    assert step.evicted_page == unused[-1]
                else:
                    assert step.evicted_page == max(previous, key=future.index)
            previous = step.frames


def test_optimal_never_worse_than_other_policies():
    for pages in _random_sequences():
        results = compare(pages, 3)
        best = results[ReplacementPolicy.OPTIMAL].total_faults
        assert all(best <= r.total_faults for r in results.values())


def test_snapshots_are_independent_copies():
    result = run(ReplacementPolicy.FIFO, SHORT, 3)
    assert result.steps[0].frames == (1,)
    assert result.steps[1].frames == (1, 2)
    for step in result.steps:
        assert isinstance(step.frames, tuple)
        assert isinstance(step.aux, tuple)


def test_same_simulator_instance_gives_independent_runs():
    sim = SecondChanceSimulator(2)
    first = sim.simulate(SHORT)
    second = sim.simulate(SHORT)
    assert first == second


def test_accepts_any_iterable():
    assert run(ReplacementPolicy.OPTIMAL, iter(SHORT), 3) == run(ReplacementPolicy.OPTIMAL, SHORT, 3)
    assert run(ReplacementPolicy.LRU, (p for p in SHORT), 3).total_faults == 4


def test_event_log():
    result = run(ReplacementPolicy.FIFO, SHORT, 3)
    assert result.event_log(2) == [
        "INSERT: Page 1 inserted into frame 0",
        "INSERT: Page 2 inserted into frame 1",
    ]
    assert len(result.event_log()) == 6


# -----------------------------
# Edge cases and errors
# -----------------------------

@pytest.mark.parametrize("algorithm", ReplacementPolicy.ALL)
def test_empty_sequence(algorithm):
    result = run(algorithm, [], 3)
    assert result.steps == ()
    assert result.total_faults == 0
    assert result.total_hits == 0
    assert result.total_references == 0
    assert result.hit_ratio == 0.0


@pytest.mark.parametrize("algorithm", ReplacementPolicy.ALL)
@pytest.mark.parametrize("frame_count", [0, -1, 2.5, True])
def test_invalid_frame_count(algorithm, frame_count):
    with pytest.raises(InvalidFrameCount):
        run(algorithm, SHORT, frame_count)


@pytest.mark.parametrize("algorithm", ["mru", "FIFO", "", "second_chance", ["fifo"], None, 1])
def test_unknown_algorithm(algorithm):
    with pytest.raises(UnknownAlgorithm):
        run(algorithm, SHORT, 3)


def test_errors_are_value_errors():
    with pytest.raises(ValueError):
        run("clock", SHORT, 3)
    with pytest.raises(ValueError):
        FIFOSimulator(0)


@pytest.mark.parametrize("hits,total,expected", [
    (2, 6, 33.3),
    (2, 3, 66.7),
    (1, 6, 16.7),
    (1, 8, 12.5),
    (0, 5, 0.0),
    (5, 5, 100.0),
    (0, 0, 0.0),
])
def test_hit_percentage(hits, total, expected):
    assert hit_percentage(hits, total) == expected


def test_step_hit_ratio_is_progressive():
    result = run(ReplacementPolicy.FIFO, SHORT, 3)
    assert [s.hit_ratio for s in result.steps] == [0.0, 0.0, 0.0, 25.0, 40.0, 33.3]
