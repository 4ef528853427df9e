"""Guided walkthrough that builds both tangents step by step.

The walkthrough is an ordered list of :class:`DemoStep` objects run one after
another with explicit waits in between. A :class:`CancellationToken` is
checked before every step; a step that has already started is allowed to
finish. Waits go through an injectable ``sleep`` so callers (and tests) can
run the sequence without real delays.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from .schema import DerivativePoint, Intersection
from .session import (
    Session,
    build_tangent_at_derivative_point,
    clear_all,
    derivative_point_near,
    intersection,
    select_slot,
    sync_zoom,
)

logger = logging.getLogger(__name__)


class CancellationToken:
    """Cooperative stop flag shared between the walkthrough and its caller."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()


@dataclass(frozen=True)
class DemoStep:
    number: float
    text: str
    action: Callable[[], None]


@dataclass
class DemoReport:
    """What a walkthrough run did.

    Attributes:
        started: ``False`` when the run was refused (no data, or a run was
            already in progress).
        stopped: ``True`` when cancellation interrupted the sequence.
        completed_steps: Numbers of the steps that ran to completion.
        highlights: Temperature bands highlighted on the derivative chart.
        intersection: Tangent intersection after the run, if any.
    """

    started: bool = False
    stopped: bool = False
    completed_steps: List[float] = field(default_factory=list)
    highlights: List[Tuple[float, float]] = field(default_factory=list)
    intersection: Optional[Intersection] = None


def find_first_tangent_point(
    session: Session, target: float | None = None
) -> Optional[DerivativePoint]:
    """Derivative point nearest to the baseline target temperature."""
    if target is None:
        target = session.config.demo.first_target
    return derivative_point_near(session, target)


def find_second_tangent_point(
    session: Session, window: Tuple[float, float] | None = None
) -> Optional[DerivativePoint]:
    """Derivative minimum inside the demo zoom window (the endotherm flank)."""
    lo, hi = window if window is not None else session.config.demo.zoom_range
    inside = [p for p in session.derivative_points if lo <= p.x <= hi]
    if not inside:
        return None
    return min(inside, key=lambda p: p.y)


def build_demo_steps(
    session: Session,
    report: DemoReport,
    sleep: Callable[[float], None] = time.sleep,
) -> List[DemoStep]:
    """Return the walkthrough as an ordered list of steps bound to ``session``."""
    demo = session.config.demo
    half = demo.highlight_half_width

    def analyze():
        sleep(demo.step_delay)

    def zoom():
        sync_zoom(session, *demo.zoom_range)
        sleep(demo.step_delay / 2)

    def highlight(finder):
        def action():
            point = finder(session)
            if point is not None:
                report.highlights.append((point.x - half, point.x + half))
                sleep(demo.highlight_duration)

        return action

    def build(finder, index):
        def action():
            point = finder(session)
            if point is not None:
                sleep(demo.click_delay)
                build_tangent_at_derivative_point(session, point, index=index)

        return action

    def switch():
        sleep(demo.step_delay / 2)
        select_slot(session, 1)
        sleep(demo.step_delay / 2)

    def finish():
        sleep(demo.step_delay)

    lo, hi = demo.zoom_range
    return [
        DemoStep(1, "Analyzing the derivative chart...", analyze),
        DemoStep(1.5, f"Zooming to {lo:g}-{hi:g} °C", zoom),
        DemoStep(
            2,
            "Finding the region before the peak where the derivative is flat",
            highlight(find_first_tangent_point),
        ),
        DemoStep(3, "Building the first tangent", build(find_first_tangent_point, 0)),
        DemoStep(4, "Switching to the second tangent", switch),
        DemoStep(5, "Finding the peak region", highlight(find_second_tangent_point)),
        DemoStep(
            6,
            "Building the second tangent through the derivative minimum",
            build(find_second_tangent_point, 1),
        ),
        DemoStep(7, "Done! Reading off the result", finish),
    ]


def run_demo(
    session: Session,
    token: CancellationToken | None = None,
    sleep: Callable[[float], None] = time.sleep,
    on_step: Callable[[DemoStep], None] | None = None,
) -> DemoReport:
    """Run the walkthrough on ``session`` until it finishes or is cancelled.

    Args:
        session: Session with loaded data. Existing tangents are cleared.
        token: Checked before each step; cancel it to stop the run.
        sleep: Wait function taking seconds.
        on_step: Called with each step just before it runs.

    Returns:
        DemoReport: Outcome of the run. ``session.demo_running`` is always
        cleared on return.
    """
    report = DemoReport()
    if session.demo_running or not session.is_data_loaded:
        logger.info("Demo not started (running=%s)", session.demo_running)
        return report

    token = token or CancellationToken()
    report.started = True
    session.demo_running = True
    logger.info("Demo started")
    clear_all(session)

    try:
        for step in build_demo_steps(session, report, sleep=sleep):
            if token.cancelled:
                report.stopped = True
                logger.info("Demo stopped before step %s", step.number)
                break
            logger.info("Demo step %s: %s", step.number, step.text)
            if on_step is not None:
                on_step(step)
            step.action()
            report.completed_steps.append(step.number)
    finally:
        session.demo_running = False
        logger.info("Demo finished")

    report.intersection = intersection(session)
    return report
