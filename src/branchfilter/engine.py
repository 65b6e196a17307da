"""Ordered inclusion/exclusion decision for a single branch.

Rules are evaluated in a fixed order and the first one that applies wins:

1. deny list match excludes (overrides everything, including the allow list)
2. allow list match includes
3. change requests and tags are always included
4. ``inactivity_days <= 0`` disables the age rule
5. the activity resolver is consulted; missing or unsupported data includes
   the branch, otherwise branches strictly older than the cutoff are excluded
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from datetime import UTC, datetime

from branchfilter.activity import ActivityResolver
from branchfilter.patterns import PatternSet, parse_pattern_list
from branchfilter.types import (
    REASON_AGE_CHECK,
    REASON_ALLOWLIST,
    REASON_CHANGE_REQUEST_OR_TAG,
    REASON_DENYLIST,
    REASON_FILESYSTEM_UNAVAILABLE,
    REASON_FILTER_DISABLED,
    REASON_LAST_MODIFIED_UNAVAILABLE,
    REASON_LAST_MODIFIED_UNSUPPORTED,
    REASON_SOURCE_UNAVAILABLE,
    ActivityTimestamp,
    ActivityUnavailable,
    ActivityUnsupported,
    BranchKind,
    BranchRef,
    Decision,
    FilterConfig,
)

logger = logging.getLogger(__name__)

DiagnosticSink = Callable[[str], None]

MILLIS_PER_DAY = 86_400 * 1000
DIAGNOSTIC_PREFIX = "InactiveBranchFilter"


def now_millis() -> int:
    """Current wall clock as UTC epoch milliseconds."""
    return time.time_ns() // 1_000_000


def cutoff_millis(now_ms: int, inactivity_days: int) -> int:
    """Instant before which a branch counts as stale."""
    return now_ms - inactivity_days * MILLIS_PER_DAY


def format_millis(value: int) -> str:
    return datetime.fromtimestamp(value / 1000, tz=UTC).isoformat()


def format_diagnostic(name: str, decision: Decision) -> str:
    return f"{DIAGNOSTIC_PREFIX}: {name} decision={decision.verdict} reason={decision.describe()}"


def evaluate(
    branch: BranchRef,
    config: FilterConfig,
    deny: PatternSet,
    allow: PatternSet,
    resolve_activity: ActivityResolver,
    now_ms: int | None = None,
    sink: DiagnosticSink | None = None,
) -> Decision:
    """Decide whether ``branch`` is excluded and emit one diagnostic line.

    The line goes to ``sink`` when one is attached, otherwise to the module
    logger at DEBUG.
    """
    decision = _decide(branch, config, deny, allow, resolve_activity, now_ms)
    line = format_diagnostic(branch.name, decision)
    if sink is not None:
        sink(line)
    else:
        logger.debug(line)
    return decision


def _decide(
    branch: BranchRef,
    config: FilterConfig,
    deny: PatternSet,
    allow: PatternSet,
    resolve_activity: ActivityResolver,
    now_ms: int | None,
) -> Decision:
    name = branch.name
    if deny.matches(name):
        return Decision(excluded=True, reason=REASON_DENYLIST)
    if allow.matches(name):
        return Decision(excluded=False, reason=REASON_ALLOWLIST)
    if branch.kind in (BranchKind.CHANGE_REQUEST, BranchKind.TAG):
        return Decision(excluded=False, reason=REASON_CHANGE_REQUEST_OR_TAG)
    if config.inactivity_days <= 0:
        return Decision(excluded=False, reason=REASON_FILTER_DISABLED)

    result = resolve_activity(branch)
    if isinstance(result, ActivityUnavailable):
        if result.missing == "source":
            return Decision(excluded=False, reason=REASON_SOURCE_UNAVAILABLE)
        return Decision(excluded=False, reason=REASON_FILESYSTEM_UNAVAILABLE)
    if isinstance(result, ActivityUnsupported):
        return Decision(excluded=False, reason=REASON_LAST_MODIFIED_UNSUPPORTED)
    if not isinstance(result, ActivityTimestamp) or result.millis <= 0:
        return Decision(excluded=False, reason=REASON_LAST_MODIFIED_UNAVAILABLE)

    now = now_millis() if now_ms is None else now_ms
    cutoff = cutoff_millis(now, config.inactivity_days)
    return Decision(
        excluded=result.millis < cutoff,
        reason=REASON_AGE_CHECK,
        detail=f"lastModified={format_millis(result.millis)} cutoff={format_millis(cutoff)}",
    )


class InactiveBranchFilter:
    """Filter bound to one configuration, with its pattern sets compiled once."""

    display_name = "Filter inactive branches"
    symbol = "inactiveBranchFilter"

    def __init__(self, config: FilterConfig):
        self.config = config
        self.allow = parse_pattern_list(config.allow_list)
        self.deny = parse_pattern_list(config.deny_list)

    @classmethod
    def from_values(
        cls,
        inactivity_days: int,
        allow_list: str | None = None,
        deny_list: str | None = None,
    ) -> InactiveBranchFilter:
        return cls(FilterConfig.create(inactivity_days, allow_list, deny_list))

    def decide(
        self,
        branch: BranchRef,
        resolver: ActivityResolver,
        *,
        now_ms: int | None = None,
        sink: DiagnosticSink | None = None,
    ) -> Decision:
        return evaluate(branch, self.config, self.deny, self.allow, resolver, now_ms=now_ms, sink=sink)

    def is_excluded(
        self,
        branch: BranchRef,
        resolver: ActivityResolver,
        *,
        now_ms: int | None = None,
        sink: DiagnosticSink | None = None,
    ) -> bool:
        return self.decide(branch, resolver, now_ms=now_ms, sink=sink).excluded

    def head_filter(
        self,
        resolver: ActivityResolver,
        sink: DiagnosticSink | None = None,
    ) -> Callable[[BranchRef], bool]:
        """Return a predicate a discovery host can install as its head filter."""

        def _is_excluded(branch: BranchRef) -> bool:
            return self.is_excluded(branch, resolver, sink=sink)

        return _is_excluded
