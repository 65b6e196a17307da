"""Domain types for the inactive branch filter."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal

DEFAULT_ALLOW_LIST = "master\nmain"
DEFAULT_DENY_LIST = ""

REASON_DENYLIST = "denylist"
REASON_ALLOWLIST = "allowlist"
REASON_CHANGE_REQUEST_OR_TAG = "change-request-or-tag"
REASON_FILTER_DISABLED = "inactive-filter-disabled"
REASON_SOURCE_UNAVAILABLE = "scm-source-unavailable"
REASON_FILESYSTEM_UNAVAILABLE = "scm-filesystem-unavailable"
REASON_LAST_MODIFIED_UNSUPPORTED = "last-modified-unsupported"
REASON_LAST_MODIFIED_UNAVAILABLE = "last-modified-unavailable"
REASON_AGE_CHECK = "age-check"

REASONS: tuple[str, ...] = (
    REASON_DENYLIST,
    REASON_ALLOWLIST,
    REASON_CHANGE_REQUEST_OR_TAG,
    REASON_FILTER_DISABLED,
    REASON_SOURCE_UNAVAILABLE,
    REASON_FILESYSTEM_UNAVAILABLE,
    REASON_LAST_MODIFIED_UNSUPPORTED,
    REASON_LAST_MODIFIED_UNAVAILABLE,
    REASON_AGE_CHECK,
)


class BranchKind(str, Enum):
    """Specialization of a branch-like ref."""

    PLAIN = "plain"
    CHANGE_REQUEST = "change-request"
    TAG = "tag"


@dataclass(frozen=True)
class BranchRef:
    """One discovered branch, tag or change request."""

    name: str
    kind: BranchKind = BranchKind.PLAIN


@dataclass(frozen=True)
class FilterConfig:
    """Normalized filter configuration for one evaluation pass."""

    inactivity_days: int = 0
    allow_list: str = DEFAULT_ALLOW_LIST
    deny_list: str = DEFAULT_DENY_LIST

    @classmethod
    def create(
        cls,
        inactivity_days: int,
        allow_list: str | None = None,
        deny_list: str | None = None,
    ) -> FilterConfig:
        """Build a config, clamping days to >= 0 and trimming both lists."""
        return cls(
            inactivity_days=max(0, int(inactivity_days)),
            allow_list=_normalize_list(DEFAULT_ALLOW_LIST if allow_list is None else allow_list),
            deny_list=_normalize_list(DEFAULT_DENY_LIST if deny_list is None else deny_list),
        )

    @property
    def enabled(self) -> bool:
        return self.inactivity_days > 0


def _normalize_list(raw: str) -> str:
    return raw.strip()


@dataclass(frozen=True)
class ActivityTimestamp:
    """Last activity instant in epoch milliseconds; <= 0 means no usable value."""

    millis: int


@dataclass(frozen=True)
class ActivityUnsupported:
    """The backend cannot report activity time at all."""


@dataclass(frozen=True)
class ActivityUnavailable:
    """No source or no filesystem view could be obtained for the branch."""

    missing: Literal["source", "filesystem"] = "filesystem"


ActivityLookupResult = ActivityTimestamp | ActivityUnsupported | ActivityUnavailable


@dataclass(frozen=True)
class Decision:
    """Outcome of evaluating a single branch."""

    excluded: bool
    reason: str
    detail: str | None = None

    def describe(self) -> str:
        """Reason tag followed by its detail, when there is one."""
        if self.detail:
            return f"{self.reason} {self.detail}"
        return self.reason

    @property
    def verdict(self) -> str:
        """`exclude` or `include`, as printed in diagnostic lines."""
        return "exclude" if self.excluded else "include"

    def to_dict(self) -> dict[str, str | bool | None]:
        """JSON-ready projection used by the CLI."""
        return {
            "excluded": self.excluded,
            "decision": self.verdict,
            "reason": self.reason,
            "detail": self.detail,
        }
