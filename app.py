"""
Page Replacement Visualizer — FIFO, LRU, Optimal, Second Chance & LFU

This application provides an interactive, step-by-step visualization of the
classic Operating System page replacement algorithms:
    - FIFO (First In First Out)
    - LRU (Least Recently Used)
    - Optimal (Belady)
    - Second Chance (Clock)
    - LFU (Least Frequently Used)

The simulation itself lives in engine.py and is computed eagerly; this module
only replays the resulting trace (timeline scrubbing, auto-play, export).

Built with Streamlit for the web interface and Plotly for visualizations.
"""

# =============================================================================
# IMPORTS
# =============================================================================

import time                                  # For pacing the auto-play
from typing import List

import streamlit as st                       # Web application framework
import plotly.graph_objects as go            # Interactive plotting library

import config
from engine import ReplacementPolicy, SimulationResult, Step, compare, run
from utils import (
    export_trace_csv,
    format_aux,
    frame_cells,
    generate_random_pages,
    get_color,
    parse_reference_string,
    progress_stats,
    trace_filename,
    validate_frame_count,
    validate_random_inputs,
)


# =============================================================================
# FIGURES
# =============================================================================

def build_frames_figure(step: Step, frame_count: int) -> go.Figure:
    """
    Bar chart with one uniform bar per physical frame.

    The frame holding the referenced page is colored green on a hit and red
    on a fault; other occupied frames are blue and free frames gray.

    Args:
        step (Step): The step to draw
        frame_count (int): Number of frames in the simulation

    Returns:
        go.Figure: The frames figure
    """
    cells = frame_cells(step, frame_count)

    x = []      # Frame labels
    y = []      # Bar heights (all 1 for uniform display)
    text = []   # Page shown inside each bar
    colors = [] # Color coding by cell state

    for cell in cells:
        x.append(f"Frame {cell['frame']}")
        y.append(1)
        text.append(str(cell["page"]) if cell["page"] is not None else "-")
        colors.append(get_color(cell["state"]))

    fig = go.Figure()
    fig.add_trace(go.Bar(
        x=x,
        y=y,
        text=text,
        textposition="inside",
        textfont=dict(size=22),
        marker_color=colors,
        hovertext=[f"{label}: {t}" for label, t in zip(x, text)],
        hoverinfo="text",
    ))
    fig.update_layout(
        height=200,
        showlegend=False,
        title=f"Step {step.step_number}: page {step.page} ({step.result})",
        yaxis=dict(showticklabels=False, range=[0, 1]),
    )
    return fig


def build_totals_figure(result: SimulationResult) -> go.Figure:
    fig = go.Figure()
    fig.add_trace(go.Bar(
        x=["Hits", "Faults"],
        y=[result.total_hits, result.total_faults],
        marker_color=[get_color("hit"), get_color("fault")],
    ))
    fig.update_layout(height=300, title="Hits vs Faults (whole run)")
    return fig


def build_comparison_figure(pages: List[int], frame_count: int) -> go.Figure:
    """Grouped bar chart of faults and hits for every algorithm on the same input."""
    results = compare(pages, frame_count)
    titles = [config.ALGORITHM_INFO[a]["title"] for a in results]

    fig = go.Figure()
    fig.add_trace(go.Bar(name="Faults", x=titles, y=[r.total_faults for r in results.values()],
                         marker_color=get_color("fault")))
    fig.add_trace(go.Bar(name="Hits", x=titles, y=[r.total_hits for r in results.values()],
                         marker_color=get_color("hit"),
                         text=[f"{r.hit_ratio:.1f}%" for r in results.values()],
                         textposition="outside"))
    fig.update_layout(barmode="group", height=350,
                      title=f"All algorithms, {frame_count} frames")
    return fig


# =============================================================================
# STEP RENDERING
# =============================================================================

def render_step(result: SimulationResult, index: int):
    """Draw frames, auxiliary structure, statistics and step info for one step."""
    step = result.steps[index]

    # ----- Physical Frames -----
    st.subheader("Memory Frames")
    st.plotly_chart(build_frames_figure(step, result.frame_count), use_container_width=True)

    # ----- Auxiliary structure (queue / bits / frequencies) -----
    st.subheader(config.AUX_LABELS[result.algorithm])
    aux = format_aux(result.algorithm, step)
    st.write("  →  ".join(aux) if aux else "Empty")

    # ----- Statistics so far -----
    st.subheader("Statistics")
    stats = progress_stats(step, result.frame_count)
    m1, m2, m3, m4 = st.columns(4)
    m1.metric("Page Faults", stats["faults"])
    m2.metric("Hit Rate", f"{stats['hit_rate']:.1f}%")
    m3.metric("Frame Utilization", f"{stats['utilization']}%")
    m4.metric("References", stats["total"])

    # ----- Step info -----
    st.subheader("Step Info")
    st.markdown(f"**Step {step.step_number}:** Accessing page **{step.page}**")
    st.markdown(f"**Action:** {step.action}")
    if step.is_hit:
        st.success("HIT")
    else:
        st.error("FAULT")
    if step.evicted_page is not None:
        st.markdown(f"**Replaced:** Page {step.evicted_page}")
    st.caption("Memory Frames: [" + ", ".join(str(p) for p in step.frames) + "]")


# =============================================================================
# SESSION STATE HELPERS
# =============================================================================

def _set_step(index: int):
    # Button callback: runs before the rerun, so the timeline widget can be updated
    result: SimulationResult = st.session_state.result
    index = max(0, min(index, len(result.steps) - 1))
    st.session_state.step_index = index
    st.session_state.timeline = index + 1


def _on_scrub():
    st.session_state.step_index = st.session_state.timeline - 1


# =============================================================================
# STREAMLIT UI - Web Application Interface
# =============================================================================

st.set_page_config(page_title="Page Replacement Visualizer", layout="wide")

# Page selector for switching between Simulator and Concepts views
page = st.sidebar.radio("Choose View", ["Simulator", "Concepts"])

st.title("Page Replacement Visualizer — FIFO, LRU, Optimal, Second Chance & LFU")

# =============================================================================
# CONCEPTS PAGE - Educational Content
# =============================================================================

if page == "Concepts":
    st.header("Page Replacement Concepts")
    st.markdown(
        """
        ## 📘 Key Concepts

        ### **1. Page Fault**
        - Occurs when a referenced page is not in any physical frame.
        - The OS loads the page, evicting a resident page when all frames are full.

        ### **2. Page Hit**
        - The referenced page is already resident; nothing is loaded.

        ### **3. Hit Ratio**
        - Hits divided by total references, shown as a percentage.

        ### **4. Replacement Algorithms**
        When every frame is occupied, one resident page must be chosen as the victim:
        """
    )
    for algorithm in ReplacementPolicy.ALL:
        info = config.ALGORITHM_INFO[algorithm]
        st.markdown(f"#### **{info['title']}**\n- {info['description']}")
    st.markdown(
        """
        ### **5. Belady's Anomaly**
        - With FIFO, adding frames can *increase* the number of faults.
        - Try `1,2,3,4,1,2,5,1,2,3,4,5` with 3 and then 4 frames.
        """
    )
    st.stop()  # Don't render the simulator on the Concepts page

# -----------------------------------------------------------------------------
# SIDEBAR - Simulation Settings
# -----------------------------------------------------------------------------

st.sidebar.header("Simulation Settings")

algorithm = st.sidebar.selectbox(
    "Algorithm",
    options=list(ReplacementPolicy.ALL),
    format_func=lambda a: config.ALGORITHM_INFO[a]["title"],
)
st.sidebar.caption(config.ALGORITHM_INFO[algorithm]["description"])

mode = st.sidebar.radio("Reference string", ["Random", "Custom"], horizontal=True)

if mode == "Random":
    length = st.sidebar.number_input(
        "Length",
        min_value=config.MIN_LENGTH,
        max_value=config.MAX_LENGTH,
        value=config.DEFAULT_LENGTH,
    )
    max_page = st.sidebar.number_input(
        "Max page number",
        min_value=config.MIN_MAX_PAGE,
        max_value=config.MAX_MAX_PAGE,
        value=config.DEFAULT_MAX_PAGE,
    )
else:
    reference_text = st.sidebar.text_area(
        "Pages (comma or space separated)",
        value=config.DEFAULT_REFERENCE_STRING,
    )

frame_count = st.sidebar.number_input(
    "Frames",
    min_value=config.MIN_FRAMES,
    max_value=config.MAX_FRAMES,
    value=config.DEFAULT_FRAMES,
)

speed = st.sidebar.slider(
    "Playback speed (x)",
    min_value=config.MIN_SPEED,
    max_value=config.MAX_SPEED,
    value=config.DEFAULT_SPEED,
    step=0.5,
)

# ----- Run the simulation -----
if st.sidebar.button("Simulate", type="primary"):
    try:
        if mode == "Random":
            validate_random_inputs(int(length), int(max_page))
            pages = generate_random_pages(int(length), int(max_page))
        else:
            pages = parse_reference_string(reference_text)
        validate_frame_count(int(frame_count))

        st.session_state.result = run(algorithm, pages, int(frame_count))
        st.session_state.pages = pages
        st.session_state.step_index = 0
        st.session_state.timeline = 1
    except ValueError as e:
        st.sidebar.error(str(e))

# Play loop finished on the previous run: move the timeline to the last step
if st.session_state.pop("sync_timeline", False):
    st.session_state.timeline = st.session_state.step_index + 1

result: SimulationResult = st.session_state.get("result")

if result is None:
    st.info("Choose an algorithm and a reference string in the sidebar, then press **Simulate**.")
    st.stop()

if not result.steps:
    st.warning("The reference string is empty; there is nothing to replay.")
    st.stop()

pages = st.session_state.pages
n_steps = len(result.steps)
index = st.session_state.get("step_index", 0)

st.markdown(
    f"**{config.ALGORITHM_INFO[result.algorithm]['title']}** with {result.frame_count} frames — "
    "reference string: `" + ", ".join(str(p) for p in pages) + "`"
)

# =============================================================================
# MAIN CONTENT AREA - Two Column Layout
# =============================================================================

col1, col2 = st.columns([1, 2])

# -----------------------------------------------------------------------------
# LEFT COLUMN - Playback, Event Log and Export
# -----------------------------------------------------------------------------

with col1:
    st.subheader("Controls")

    b1, b2, b3, b4 = st.columns(4)
    b1.button("◀ Prev", on_click=_set_step, args=(index - 1,), disabled=index == 0)
    play = b2.button("▶ Play", disabled=index >= n_steps - 1)
    b3.button("Next ▶", on_click=_set_step, args=(index + 1,), disabled=index >= n_steps - 1)
    b4.button("Reset", on_click=_set_step, args=(0,))

    # Timeline scrubbing over the already computed trace
    if n_steps > 1:
        st.slider("Timeline (step)", min_value=1, max_value=n_steps, key="timeline", on_change=_on_scrub)
    st.write(f"Step {index + 1} of {n_steps}")

    # Event log (most recent entries, newest first)
    st.subheader("Event Log")
    for ev in result.event_log(index + 1)[-config.EVENT_LOG_DEPTH:][::-1]:
        st.write(ev)

    st.subheader("Export")
    st.download_button(
        "Export Trace (CSV)",
        data=export_trace_csv(result),
        file_name=trace_filename(result.algorithm),
        mime="text/csv",
    )
    if st.button("Screenshot"):
        st.info("Screenshot feature: use your browser's screenshot tool "
                "(Ctrl+Shift+S in Firefox) to capture the current view.")

# -----------------------------------------------------------------------------
# RIGHT COLUMN - Visualizations
# -----------------------------------------------------------------------------

with col2:
    step_view = st.empty()
    with step_view.container():
        render_step(result, index)

st.markdown("---")

# ----- Whole-run summary -----
s1, s2 = st.columns(2)
with s1:
    st.subheader("Summary")
    st.metric("Total References", result.total_references)
    st.metric("Page Faults", result.total_faults)
    st.metric("Page Hits", result.total_hits)
    st.metric("Hit Ratio", f"{result.hit_ratio:.1f}%")
with s2:
    st.plotly_chart(build_totals_figure(result), use_container_width=True)

with st.expander("Compare all algorithms on this reference string"):
    st.plotly_chart(build_comparison_figure(pages, result.frame_count), use_container_width=True)

# ----- Auto-play -----
# Replays the remaining steps into the right column, then syncs the timeline.
if play:
    delay = config.BASE_STEP_SECONDS / speed
    for i in range(index + 1, n_steps):
        time.sleep(delay)
        with step_view.container():
            render_step(result, i)
    st.session_state.step_index = n_steps - 1
    st.session_state.sync_timeline = True
    st.rerun()

# =============================================================================
# FOOTER - Usage Tips and Examples
# =============================================================================

st.markdown("---")
st.markdown(
    "**Usage tips**:\n"
    "- Pick an algorithm, generate or type a reference string and click **Simulate**.\n"
    "- Use **Prev** / **Next** or drag the timeline to inspect any step.\n"
    "- **Play** replays the remaining steps at the selected speed.\n"
    "- **Export Trace** downloads every step and the summary as CSV."
)

st.markdown("---")
st.markdown(
    "**Instructor examples**:\n"
    "1) Belady's anomaly: FIFO on `1,2,3,4,1,2,5,1,2,3,4,5` with 3 frames gives 9 faults, with 4 frames 10.\n"
    "2) Optimal vs LRU: run `7,0,1,2,0,3,0,4,2,3,0,3,2` with 3 frames and compare the fault counts."
)
