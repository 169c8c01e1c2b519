"""Downtime window matching service.

Decides which downtime windows apply to a cluster and which sample
timestamps fall inside applicable downtime.
"""

from collections.abc import Iterable, Mapping
from datetime import datetime

from src.domain.entities.downtime_window import DowntimeWindow


class DowntimeMatcher:
    """Matches downtime windows against cluster facts and sample timestamps.

    Cluster matching is an OR across the matchers of a window and an AND
    within a single matcher:
    - A window with no matchers affects no cluster
    - A window with an empty matcher affects every cluster
    """

    def window_matches_cluster_facts(
        self, window: DowntimeWindow, facts: Mapping[str, str]
    ) -> bool:
        """Check whether a downtime window affects a cluster.

        Args:
            window: Downtime window to evaluate
            facts: Fact mapping of the cluster

        Returns:
            True if at least one matcher of the window is satisfied by the facts
        """
        return any(matcher.matches(facts) for matcher in window.affects)

    def filter_for_cluster(
        self, windows: Iterable[DowntimeWindow], facts: Mapping[str, str]
    ) -> list[DowntimeWindow]:
        """Keep only the windows that affect a cluster, preserving order."""
        return [w for w in windows if self.window_matches_cluster_facts(w, facts)]

    def timestamp_in_downtime(
        self, ts: datetime, windows: Iterable[DowntimeWindow]
    ) -> bool:
        """Check whether a sample timestamp is covered by any window.

        Windows are matched as (start, end]; see DowntimeWindow.contains.

        Args:
            ts: Sample timestamp
            windows: Applicable downtime windows

        Returns:
            True if any window contains the timestamp
        """
        return any(w.contains(ts) for w in windows)
