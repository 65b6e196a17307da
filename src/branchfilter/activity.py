"""Activity resolver interface and the source-backed adapter."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Protocol

from branchfilter.types import (
    ActivityLookupResult,
    ActivityTimestamp,
    ActivityUnavailable,
    ActivityUnsupported,
    BranchRef,
)

logger = logging.getLogger(__name__)


class ActivityResolver(Protocol):
    """Return the last activity of a branch as a three-way result."""

    def __call__(self, branch: BranchRef) -> ActivityLookupResult: ...


class ScmFileSystem(Protocol):
    """Read-only view of one branch head; must be closed after use."""

    def last_modified(self) -> int: ...

    def close(self) -> None: ...

    def __enter__(self) -> ScmFileSystem: ...

    def __exit__(self, *exc_info: object) -> None: ...


class ScmSource(Protocol):
    """Source-control source able to open a view keyed by branch."""

    def open_filesystem(self, branch: BranchRef) -> ScmFileSystem | None: ...


def lookup_activity(source: ScmSource | None, branch: BranchRef) -> ActivityLookupResult:
    """Query ``source`` for the branch's last activity, never raising."""
    if source is None:
        return ActivityUnavailable("source")

    try:
        filesystem = source.open_filesystem(branch)
    except Exception:
        logger.debug("Unable to open filesystem view for %s", branch.name, exc_info=True)
        return ActivityUnavailable("filesystem")
    if filesystem is None:
        return ActivityUnavailable("filesystem")

    try:
        with filesystem as view:
            last_modified = int(view.last_modified() or 0)
    except NotImplementedError:
        logger.debug("Filesystem does not support last_modified for %s", branch.name)
        return ActivityUnsupported()
    except Exception:
        logger.debug("Last activity lookup failed for %s", branch.name, exc_info=True)
        return ActivityUnavailable("filesystem")
    return ActivityTimestamp(last_modified)


def source_resolver(source: ScmSource | None) -> ActivityResolver:
    """Bind ``source`` into an ActivityResolver."""

    def _resolve(branch: BranchRef) -> ActivityLookupResult:
        return lookup_activity(source, branch)

    return _resolve


def static_resolver(
    activity: Mapping[str, int],
    default: ActivityLookupResult | None = None,
) -> ActivityResolver:
    """Resolver over known branch-name -> epoch-millis values."""
    fallback = ActivityUnsupported() if default is None else default

    def _resolve(branch: BranchRef) -> ActivityLookupResult:
        if branch.name in activity:
            return ActivityTimestamp(int(activity[branch.name]))
        return fallback

    return _resolve
