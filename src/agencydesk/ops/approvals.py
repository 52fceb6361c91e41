"""
Content auto-approval — deadline-triggered batch transition.

One linear pass per invocation::

    select_due_posts ──► approve_posts ──► cascade_post (per post, sequential)
       (read-only)        (one bulk write)    ├─ complete "Review Content Post" todos
                                              └─ append "Content Auto-Approved" activity

Failure policy:
    - Selection or transition failure aborts the pass and comes back as a
      failed :class:`OperationResult` (``SELECT_FAILED`` / ``TRANSITION_FAILED``).
      Posts already approved stay approved; nothing is compensated.
    - Cascade failures are per post and per step. They are logged and
      recorded in the post's :class:`CascadeOutcome`; the loop continues and
      the overall result is still a success.

There is no guard against two passes running at the same time. Overlapping
invocations can both cascade the same post and write duplicate activities.

Doc-Types: OPS_MODULE
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, timedelta
from enum import Enum
from typing import Any

from agencydesk.core.logging import LogContext, get_logger
from agencydesk.core.models import Activity, ContentPost
from agencydesk.ops.context import OperationContext
from agencydesk.ops.result import OperationResult, start_timer

logger = get_logger(__name__)

REVIEW_TODO_TITLE = "Review Content Post"
ACTIVITY_TYPE = "Content Auto-Approved"
TODO_LOOKBACK = timedelta(days=2)

NO_POSTS_MESSAGE = "No posts to auto-approve"
SUCCESS_MESSAGE = "Posts auto-approved successfully"


class StepStatus(str, Enum):
    OK = "ok"
    FAILED = "failed"


@dataclass
class CascadeOutcome:
    """What happened to the two side effects of one approved post."""

    post_id: str
    client_id: str
    todo_status: StepStatus = StepStatus.OK
    todos_completed: int = 0
    todo_error: str | None = None
    activity_status: StepStatus = StepStatus.OK
    activity_id: str | None = None
    activity_error: str | None = None

    @property
    def ok(self) -> bool:
        return self.todo_status is StepStatus.OK and self.activity_status is StepStatus.OK

    def to_dict(self) -> dict[str, Any]:
        return {
            "post_id": self.post_id,
            "client_id": self.client_id,
            "todo": {
                "status": self.todo_status.value,
                "completed": self.todos_completed,
                "error": self.todo_error,
            },
            "activity": {
                "status": self.activity_status.value,
                "id": self.activity_id,
                "error": self.activity_error,
            },
        }


@dataclass
class AutoApprovalReport:
    """Batch result of one auto-approval pass."""

    message: str
    processed: int
    posts: list[ContentPost] = field(default_factory=list)
    outcomes: list[CascadeOutcome] = field(default_factory=list)
    dry_run: bool = False

    @property
    def failed_outcomes(self) -> list[CascadeOutcome]:
        return [o for o in self.outcomes if not o.ok]

    def to_dict(self) -> dict[str, Any]:
        return {
            "message": self.message,
            "processed": self.processed,
            "posts": [p.to_dict() for p in self.posts],
            "outcomes": [o.to_dict() for o in self.outcomes],
            "dry_run": self.dry_run,
        }


def approval_description(post: ContentPost) -> str:
    """Activity text for an automatically approved post."""
    platforms = ", ".join(post.platforms) if post.platforms else "unspecified platforms"
    return f"Content for {platforms} was automatically approved after 24 hours"


# ── Stages ───────────────────────────────────────────────────────────────


def select_due_posts(ctx: OperationContext) -> OperationResult[list[ContentPost]]:
    """Posts pending approval whose deadline is set and has passed."""
    timer = start_timer()
    try:
        posts = ctx.store.select_due_posts(ctx.now)
    except Exception as e:
        logger.error("approvals.select_failed", error=str(e))
        return OperationResult.from_exception("SELECT_FAILED", e, elapsed_ms=timer.elapsed_ms)

    logger.info("approvals.selected", count=len(posts))
    return OperationResult.ok(posts, elapsed_ms=timer.elapsed_ms)


def approve_posts(ctx: OperationContext, posts: list[ContentPost]) -> OperationResult[list[ContentPost]]:
    """Flip *posts* to ``approved`` in one bulk write and return the post-image."""
    timer = start_timer()
    ids = [p.id for p in posts]
    try:
        updated = ctx.store.approve_posts(ids, ctx.now)
    except Exception as e:
        logger.error("approvals.transition_failed", error=str(e), count=len(ids))
        return OperationResult.from_exception("TRANSITION_FAILED", e, elapsed_ms=timer.elapsed_ms)

    logger.info("approvals.transitioned", count=len(updated))
    return OperationResult.ok(updated, elapsed_ms=timer.elapsed_ms)


def cascade_post(ctx: OperationContext, post: ContentPost) -> CascadeOutcome:
    """Run both side effects for one approved post. Never raises."""
    outcome = CascadeOutcome(post_id=post.id, client_id=post.client_id)
    today = ctx.now.astimezone(UTC).date()
    due_on_or_after = today - TODO_LOOKBACK

    try:
        outcome.todos_completed = ctx.store.complete_review_todos(
            post.client_id,
            title=REVIEW_TODO_TITLE,
            due_on_or_after=due_on_or_after,
            due_on_or_before=today,
            completed_at=ctx.now,
        )
    except Exception as e:
        outcome.todo_status = StepStatus.FAILED
        outcome.todo_error = str(e)
        logger.error("approvals.cascade.todo_failed", post_id=post.id, client_id=post.client_id, error=str(e))

    try:
        activity = ctx.store.insert_activity(
            Activity(
                client_id=post.client_id,
                type=ACTIVITY_TYPE,
                description=approval_description(post),
                date=ctx.now,
                created_by=post.created_by,
            )
        )
        outcome.activity_id = activity.id
    except Exception as e:
        outcome.activity_status = StepStatus.FAILED
        outcome.activity_error = str(e)
        logger.error("approvals.cascade.activity_failed", post_id=post.id, client_id=post.client_id, error=str(e))

    logger.info(
        "approvals.post_approved",
        post_id=post.id,
        client_id=post.client_id,
        todos_completed=outcome.todos_completed,
        ok=outcome.ok,
    )
    return outcome


# ── Pass ─────────────────────────────────────────────────────────────────


def auto_approve_posts(ctx: OperationContext) -> OperationResult[AutoApprovalReport]:
    """Run one auto-approval pass: select, transition, cascade."""
    timer = start_timer()

    with LogContext(request_id=ctx.request_id, caller=ctx.caller):
        logger.info("approvals.started", now=ctx.now.isoformat(), dry_run=ctx.dry_run)

        selected = select_due_posts(ctx)
        if not selected.success:
            return OperationResult(success=False, error=selected.error, elapsed_ms=timer.elapsed_ms)

        due = selected.data or []
        if not due:
            return OperationResult.ok(
                AutoApprovalReport(message=NO_POSTS_MESSAGE, processed=0, dry_run=ctx.dry_run),
                elapsed_ms=timer.elapsed_ms,
            )

        if ctx.dry_run:
            return OperationResult.ok(
                AutoApprovalReport(
                    message=f"{len(due)} posts would be auto-approved",
                    processed=0,
                    posts=due,
                    dry_run=True,
                ),
                elapsed_ms=timer.elapsed_ms,
            )

        transitioned = approve_posts(ctx, due)
        if not transitioned.success:
            return OperationResult(success=False, error=transitioned.error, elapsed_ms=timer.elapsed_ms)

        approved = transitioned.data or []
        outcomes = [cascade_post(ctx, post) for post in approved]

        report = AutoApprovalReport(
            message=SUCCESS_MESSAGE,
            processed=len(approved),
            posts=approved,
            outcomes=outcomes,
        )
        warnings = [
            f"cascade incomplete for post {o.post_id}: {o.todo_error or o.activity_error}"
            for o in report.failed_outcomes
        ]
        logger.info(
            "approvals.finished",
            processed=report.processed,
            cascade_failures=len(report.failed_outcomes),
        )
        return OperationResult.ok(report, warnings=warnings, elapsed_ms=timer.elapsed_ms)
