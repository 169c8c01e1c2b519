"""Lieutenant integration for cluster fact lookup.

Project Syn's Lieutenant stores every cluster as a ``Cluster`` custom resource
(``syn.tools/v1alpha1``). The cluster facts live in ``spec.facts``:

    apiVersion: syn.tools/v1alpha1
    kind: Cluster
    metadata:
      name: c-green-test-1234
    spec:
      facts:
        cloud: cloudscale
        region: rma
"""

import logging
from typing import Any
from urllib.parse import quote

import httpx

from src.domain.exceptions import UpstreamError
from src.domain.repositories.cluster_fact_provider import ClusterFactProviderInterface

logger = logging.getLogger(__name__)

CLUSTER_API_PATH = "/apis/syn.tools/v1alpha1/namespaces/{namespace}/clusters/{name}"


class LieutenantError(UpstreamError):
    """Lieutenant cluster lookup failed."""

    pass


class LieutenantClusterFactProvider(ClusterFactProviderInterface):
    """Reads cluster facts from Lieutenant Cluster objects via the Kubernetes API.

    Attributes:
        api_url: Kubernetes API server URL
        namespace: Namespace containing the Cluster objects
    """

    def __init__(
        self,
        api_url: str = "https://localhost:6443",
        token: str = "",
        namespace: str = "lieutenant",
        timeout: float = 10.0,
        verify_tls: bool = True,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the Lieutenant client.

        Args:
            api_url: Kubernetes API server URL
            token: Bearer token (service account token)
            namespace: Namespace containing the Cluster objects
            timeout: Request timeout in seconds
            verify_tls: Verify the API server certificate
            client: Preconfigured HTTP client (built from the other arguments if omitted)
        """
        self.api_url = api_url.rstrip("/")
        self.namespace = namespace
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self.client = client or httpx.AsyncClient(
            timeout=timeout, headers=headers, verify=verify_tls
        )

    async def close(self) -> None:
        """Close the HTTP client connection."""
        await self.client.aclose()

    async def __aenter__(self) -> "LieutenantClusterFactProvider":
        """Async context manager entry."""
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit."""
        await self.close()

    async def get_cluster_facts(self, cluster_id: str) -> dict[str, str]:
        """Get the facts of a Lieutenant cluster.

        Args:
            cluster_id: Name of the Cluster object

        Returns:
            Fact mapping from spec.facts (empty if unset)

        Raises:
            LieutenantError: If the cluster cannot be fetched or decoded
        """
        url = self.api_url + CLUSTER_API_PATH.format(
            namespace=quote(self.namespace, safe=""),
            name=quote(cluster_id, safe=""),
        )

        try:
            response = await self.client.get(url)
            response.raise_for_status()
            cluster = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                "Lieutenant HTTP error: cluster=%s status_code=%s",
                cluster_id,
                e.response.status_code,
            )
            raise LieutenantError(
                f"could not get cluster '{cluster_id}': "
                f"Kubernetes API returned {e.response.status_code}"
            ) from e
        except httpx.RequestError as e:
            logger.error("Lieutenant connection error: %s", str(e))
            raise LieutenantError(
                f"failed to connect to Kubernetes API: {e}"
            ) from e
        except ValueError as e:
            raise LieutenantError(
                f"invalid response for cluster '{cluster_id}': {e}"
            ) from e

        spec = cluster.get("spec") if isinstance(cluster, dict) else None
        facts = spec.get("facts") if isinstance(spec, dict) else None
        facts = facts or {}
        if not isinstance(facts, dict):
            raise LieutenantError(f"cluster '{cluster_id}' has malformed facts")

        return {str(key): str(value) for key, value in facts.items()}
