# utils.py

import random
import re
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional

import config
from engine import ReplacementPolicy, SimulationResult, Step, hit_percentage


class EmptyReferenceSequence(ValueError):
    """Raised when a reference string contains no pages at all."""


# --------------------------------------
# Reference string acquisition
# --------------------------------------

def generate_random_pages(length: int, max_page: int, rng: Optional[random.Random] = None) -> List[int]:
    """Uniformly sample `length` page ids from 1..max_page."""
    rng = rng or random
    return [rng.randint(1, max_page) for _ in range(length)]


def parse_reference_string(text: str) -> List[int]:
    """
    Parse a comma and/or whitespace separated list of page numbers.

    Raises:
        EmptyReferenceSequence: If the text holds no pages
        ValueError: If a token is not an integer
    """
    tokens = [t for t in re.split(r"[\s,]+", text.strip()) if t]
    if not tokens:
        raise EmptyReferenceSequence("Please enter a reference string!")

    pages = []
    for token in tokens:
        try:
            pages.append(int(token))
        except ValueError:
            raise ValueError(f"Please enter valid numbers! ({token!r} is not a page number)") from None
    return pages


def validate_random_inputs(length: int, max_page: int):
    if length < config.MIN_LENGTH or length > config.MAX_LENGTH:
        raise ValueError(
            f"Reference string length must be between {config.MIN_LENGTH} and {config.MAX_LENGTH}!"
        )
    if max_page < config.MIN_MAX_PAGE or max_page > config.MAX_MAX_PAGE:
        raise ValueError(
            f"Max page number must be between {config.MIN_MAX_PAGE} and {config.MAX_MAX_PAGE}!"
        )


def validate_frame_count(frame_count: int):
    if frame_count < config.MIN_FRAMES or frame_count > config.MAX_FRAMES:
        raise ValueError(
            f"Frame count must be between {config.MIN_FRAMES} and {config.MAX_FRAMES}!"
        )


# --------------------------------------
# Display helpers
# --------------------------------------

def get_color(state: str) -> str:
    """Return a color for a frame cell state (hit, fault, normal or empty)."""
    return config.COLORS.get(state, config.COLORS["empty"])


def frame_cells(step: Step, frame_count: int) -> List[Dict]:
    """
    One entry per frame slot for rendering a step.

    The slot holding the referenced page is marked `hit` or `fault` depending
    on the step result; other occupied slots are `normal`, unfilled ones `empty`.
    """
    cells = []
    for slot in range(frame_count):
        if slot >= len(step.frames):
            cells.append({"frame": slot, "page": None, "state": "empty"})
            continue
        page = step.frames[slot]
        if page == step.page:
            state = "hit" if step.is_hit else "fault"
        else:
            state = "normal"
        cells.append({"frame": slot, "page": page, "state": state})
    return cells


def format_aux(algorithm: str, step: Step) -> List[str]:
    """Human readable entries of a step's auxiliary structure."""
    if algorithm == ReplacementPolicy.SECOND_CHANCE:
        return [f"{page} (bit {bit})" for page, bit in zip(step.frames, step.aux)]
    if algorithm == ReplacementPolicy.LFU:
        return [f"{page} (x{count})" for page, count in step.aux]
    return [str(page) for page in step.aux]


def progress_stats(step: Step, frame_count: int) -> Dict[str, float]:
    """Statistics over the references processed up to and including `step`."""
    # half-up, like hit_percentage
    utilization = Decimal(len(step.frames) / frame_count * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return {
        "faults": step.faults,
        "hits": step.hits,
        "hit_rate": hit_percentage(step.hits, step.step_number),
        "utilization": int(utilization),
        "total": step.step_number,
    }


# --------------------------------------
# Trace export
# --------------------------------------

def trace_filename(algorithm: str) -> str:
    return f"page_replacement_{algorithm}_trace.csv"


def export_trace_csv(result: SimulationResult) -> str:
    """
    Serialize a simulation trace as CSV text.

    Frames are joined with `|`, commas in the action text become `;`, and a
    summary block follows the step rows after a blank line.
    """
    lines = ["Step,Page,Result,Frames,Action"]
    for step in result.steps:
        frames = "|".join(str(p) for p in step.frames)
        action = step.action.replace(",", ";")
        lines.append(f'{step.step_number},{step.page},{step.result},"{frames}","{action}"')

    lines.append("")
    lines.append("Summary")
    lines.append(f"Total References,{result.total_references}")
    lines.append(f"Page Faults,{result.total_faults}")
    lines.append(f"Page Hits,{result.total_hits}")
    lines.append(f"Hit Ratio,{result.hit_ratio:.1f}%")
    lines.append(f"Algorithm,{result.algorithm.upper()}")
    return "\n".join(lines) + "\n"
