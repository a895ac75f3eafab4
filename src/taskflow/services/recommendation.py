"""Deterministic "what should I do next" recommendation.

A candidate's score is ``priority_score + due_date_score``. The first
candidate (column order, then task order) with the highest score wins.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta

from taskflow.models.core import Board, Priority, Task, utc_now

PRIORITY_SCORES: dict[Priority, int] = {
    "critical": 100,
    "high": 75,
    "medium": 50,
    "low": 25,
}
DEFAULT_PRIORITY_SCORE = 25

_ONE_DAY = timedelta(days=1)


@dataclass(frozen=True)
class ScoredTask:
    """A candidate task with its score and the parts it was built from."""

    task: Task
    score: float
    components: dict[str, float] = field(default_factory=dict)


def priority_score(priority: Priority | None) -> int:
    """Get priority score (higher is more urgent)."""
    if priority is None:
        return DEFAULT_PRIORITY_SCORE
    return PRIORITY_SCORES.get(priority, DEFAULT_PRIORITY_SCORE)


def due_date_score(due_date: datetime | None, now: datetime) -> int:
    """Get due date urgency score.

    Days until due are fractional, so "in 23 hours" counts as within one day
    and "an hour ago" as overdue.
    """
    if due_date is None:
        return 0

    # Naive timestamps are taken as UTC
    if due_date.tzinfo is None and now.tzinfo is not None:
        due_date = due_date.replace(tzinfo=now.tzinfo)
    elif now.tzinfo is None and due_date.tzinfo is not None:
        now = now.replace(tzinfo=due_date.tzinfo)

    days = (due_date - now) / _ONE_DAY
    if days < 0:
        return 100  # Overdue
    if days <= 1:
        return 90
    if days <= 3:
        return 70
    if days <= 7:
        return 50
    return 30


def is_candidate(task: Task) -> bool:
    """Open and not in the recycle bin."""
    return task.completed_at is None and task.deletion_state != "deleted"


def score_task(task: Task, now: datetime) -> ScoredTask:
    p_score = priority_score(task.priority)
    d_score = due_date_score(task.due_date, now)
    return ScoredTask(
        task=task,
        score=p_score + d_score,
        components={"priority": p_score, "due_date": d_score},
    )


def compute_recommendation(board: Board | None, now: datetime | None = None) -> Task | None:
    """Return the open task to work on next, or None.

    Args:
        board: Board to scan; None yields None
        now: Reference time, defaults to the current UTC time

    Returns:
        The first task with the maximal score, or None if nothing is open
    """
    if board is None:
        return None
    now = now or utc_now()

    best: ScoredTask | None = None
    for task in board.all_tasks():
        if not is_candidate(task):
            continue
        scored = score_task(task, now)
        if best is None or scored.score > best.score:
            best = scored
    return best.task if best else None


def rank_tasks(
    board: Board | None, now: datetime | None = None, limit: int | None = None
) -> list[ScoredTask]:
    """Score every candidate and rank them, highest first.

    Ties keep board order, so ``rank_tasks(board, now)[0].task`` is the same
    task :func:`compute_recommendation` returns.
    """
    if board is None:
        return []
    now = now or utc_now()

    scored = [score_task(task, now) for task in board.all_tasks() if is_candidate(task)]
    ranked = sorted(scored, key=lambda s: s.score, reverse=True)
    return ranked[:limit] if limit is not None else ranked


class RecommendationEngine:
    """Recommendation bound to a store; recomputed on every access."""

    def __init__(self, store, clock=utc_now):
        self.store = store
        self.clock = clock

    @property
    def recommended_task(self) -> Task | None:
        return compute_recommendation(self.store.state.current_board, self.clock())

    def top(self, limit: int = 3) -> list[ScoredTask]:
        return rank_tasks(self.store.state.current_board, self.clock(), limit)
