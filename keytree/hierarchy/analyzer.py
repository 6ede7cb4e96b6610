"""
Hierarchy analyzer.

Pre-validates flat item collections before they are turned into trees.
The builder itself is best-effort and silently tolerates everything
reported here; callers that need strict hierarchies check first.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from keytree.config import DEFAULT_CONFIG, KeyConfig
from keytree.core.item import Item, KeyPath
from keytree.keys.segment import SUFFIX_FLOOR, Segment


@dataclass
class HierarchyIssue:
    """An issue found in an item collection."""

    severity: str  # "warning", "error", "info"
    issue_type: str
    message: str
    key: str | None = None
    suggested_fix: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "severity": self.severity,
            "type": self.issue_type,
            "message": self.message,
            "key": self.key,
            "suggested_fix": self.suggested_fix,
        }


@dataclass
class HierarchyAnalysis:
    """
    Result of analyzing an item collection.

    Contains statistics and issues.
    """

    item_count: int = 0
    issues: list[HierarchyIssue] = field(default_factory=list)
    statistics: dict[str, Any] = field(default_factory=dict)

    @property
    def has_errors(self) -> bool:
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def has_warnings(self) -> bool:
        return any(issue.severity == "warning" for issue in self.issues)

    def issues_of_type(self, issue_type: str) -> list[HierarchyIssue]:
        return [issue for issue in self.issues if issue.issue_type == issue_type]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON export."""
        return {
            "item_count": self.item_count,
            "has_errors": self.has_errors,
            "has_warnings": self.has_warnings,
            "issues": [issue.to_dict() for issue in self.issues],
            "statistics": self.statistics,
        }


class HierarchyAnalyzer:
    """
    Analyzes item collections for key problems.

    Checks for:
    - Malformed segments (fail the digits-plus-letters grammar)
    - Duplicate key paths
    - Gaps (an intermediate level has no item)
    - Suffixes ending in the floor letter (no room directly below them)
    """

    def __init__(self, config: KeyConfig | None = None) -> None:
        self.config = config or DEFAULT_CONFIG

    def analyze(self, items: Iterable[Item]) -> HierarchyAnalysis:
        """Perform all checks on *items*."""
        items = list(items)
        analysis = HierarchyAnalysis(item_count=len(items))

        self._check_segments(items, analysis)
        self._check_duplicates(items, analysis)
        self._check_gaps(items, analysis)
        analysis.statistics = self._statistics(items)

        return analysis

    def _check_segments(self, items: list[Item], analysis: HierarchyAnalysis) -> None:
        """Flag numeric-looking segments that do not parse."""
        for item in items:
            for segment in item.key_path.segments:
                if not segment[:1].isdigit():
                    # Topic segment, not generated by the sequencer
                    continue
                if not Segment.is_valid(segment, self.config):
                    analysis.issues.append(
                        HierarchyIssue(
                            severity="error",
                            issue_type="malformed_segment",
                            message=f"Segment {segment!r} is not a valid key segment",
                            key=item.key,
                            suggested_fix="Rewrite the segment as digits followed by lowercase letters",
                        )
                    )
                elif Segment.parse(segment, self.config).suffix.endswith(SUFFIX_FLOOR):
                    analysis.issues.append(
                        HierarchyIssue(
                            severity="info",
                            issue_type="floor_suffix",
                            message=(
                                f"Segment {segment!r} ends in {SUFFIX_FLOOR!r}; "
                                "nothing can be inserted directly below it"
                            ),
                            key=item.key,
                        )
                    )

    def _check_duplicates(self, items: list[Item], analysis: HierarchyAnalysis) -> None:
        """Flag key paths shared by several items."""
        counts = Counter(item.key_path for item in items)
        for key_path, count in sorted(counts.items()):
            if count > 1:
                analysis.issues.append(
                    HierarchyIssue(
                        severity="warning",
                        issue_type="duplicate_key",
                        message=f"Key {key_path.joined} is used by {count} items",
                        key=key_path.joined,
                        suggested_fix="Generate a fresh key for all but one of them",
                    )
                )

    def _check_gaps(self, items: list[Item], analysis: HierarchyAnalysis) -> None:
        """Flag missing intermediate levels.

        Only levels between an item and its nearest existing ancestor are
        reported, so a top-level item with no parent is not a gap.
        """
        paths = {item.key_path for item in items}
        reported: set[KeyPath] = set()

        for key_path in sorted(paths):
            segments = key_path.segments
            ancestors = [KeyPath(segments[:n]) for n in range(1, len(segments))]
            existing = [i for i, path in enumerate(ancestors) if path in paths]
            if not existing:
                continue
            for missing in ancestors[existing[-1] + 1:]:
                if missing in reported:
                    continue
                reported.add(missing)
                analysis.issues.append(
                    HierarchyIssue(
                        severity="info",
                        issue_type="gap",
                        message=f"No item at {missing.joined}; descendants attach to the nearest ancestor",
                        key=missing.joined,
                    )
                )

    def _statistics(self, items: list[Item]) -> dict[str, Any]:
        depths = [len(item.key_path) for item in items]
        suffixed = 0
        for item in items:
            last = item.key_path.last
            if last and Segment.is_valid(last, self.config) and Segment.parse(last, self.config).suffix:
                suffixed += 1
        return {
            "max_key_depth": max(depths) if depths else 0,
            "distinct_keys": len({item.key_path for item in items}),
            "suffixed_keys": suffixed,
            "depth_distribution": dict(Counter(depths)),
        }
