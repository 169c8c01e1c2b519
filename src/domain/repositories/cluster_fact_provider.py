"""Interface for looking up cluster facts.

Cluster facts are key/value attributes describing a cluster (cloud, region,
distribution, ...). Downtime windows use them to decide which clusters they
affect.
"""

from abc import ABC, abstractmethod


class ClusterFactProviderInterface(ABC):
    """Interface for resolving a cluster ID to its facts."""

    @abstractmethod
    async def get_cluster_facts(self, cluster_id: str) -> dict[str, str]:
        """Returns the facts of a cluster.

        Args:
            cluster_id: Cluster identifier (e.g., "c-green-test-1234")

        Returns:
            Mapping of fact key to fact value (empty if the cluster has no facts)

        Raises:
            UpstreamError: If the cluster cannot be looked up
        """
        pass
