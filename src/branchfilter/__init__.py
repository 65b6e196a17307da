"""Branch inclusion decisions for source-control discovery pipelines."""

from branchfilter.activity import ActivityResolver, lookup_activity, source_resolver, static_resolver
from branchfilter.engine import InactiveBranchFilter, cutoff_millis, evaluate
from branchfilter.patterns import PatternSet, parse_pattern_list, split_pattern_text
from branchfilter.types import (
    ActivityLookupResult,
    ActivityTimestamp,
    ActivityUnavailable,
    ActivityUnsupported,
    BranchKind,
    BranchRef,
    Decision,
    FilterConfig,
)

__version__ = "0.1.0"

__all__ = [
    "ActivityLookupResult",
    "ActivityResolver",
    "ActivityTimestamp",
    "ActivityUnavailable",
    "ActivityUnsupported",
    "BranchKind",
    "BranchRef",
    "Decision",
    "FilterConfig",
    "InactiveBranchFilter",
    "PatternSet",
    "cutoff_millis",
    "evaluate",
    "lookup_activity",
    "parse_pattern_list",
    "source_resolver",
    "split_pattern_text",
    "static_resolver",
]
