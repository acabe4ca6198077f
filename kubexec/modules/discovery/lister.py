"""
Resource listing over the Kubernetes API.

The deduplicator only needs the four list calls below, so anything that
can answer them (a fake in tests, a cache, another client) can stand in
for the Kubernetes-backed lister.
"""

import logging
from typing import List, Optional, Protocol

from kubernetes.client import (
    AppsV1Api,
    CoreV1Api,
    V1DaemonSet,
    V1Deployment,
    V1Pod,
    V1StatefulSet,
)
from kubernetes.client.rest import ApiException
from urllib3.exceptions import HTTPError

from kubexec.errors import ResourceListingError

logger = logging.getLogger("kubexec.discovery.lister")


class ResourceLister(Protocol):
    """Protocol for namespace-scoped resource listing."""

    def list_pods(self, label_selector: Optional[str] = None) -> List[V1Pod]:
        ...

    def list_deployments(self) -> List[V1Deployment]:
        ...

    def list_stateful_sets(self) -> List[V1StatefulSet]:
        ...

    def list_daemon_sets(self) -> List[V1DaemonSet]:
        ...


class KubernetesResourceLister:
    """Lists pods and replica groups in one namespace."""

    def __init__(self, core_v1: CoreV1Api, apps_v1: AppsV1Api, namespace: str):
        self.core_v1 = core_v1
        self.apps_v1 = apps_v1
        self.namespace = namespace

    def list_pods(self, label_selector: Optional[str] = None) -> List[V1Pod]:
        kwargs = {"label_selector": label_selector} if label_selector else {}
        return self._items("pods", self.core_v1.list_namespaced_pod, **kwargs)

    def list_deployments(self) -> List[V1Deployment]:
        return self._items("deployments", self.apps_v1.list_namespaced_deployment)

    def list_stateful_sets(self) -> List[V1StatefulSet]:
        return self._items("statefulsets", self.apps_v1.list_namespaced_stateful_set)

    def list_daemon_sets(self) -> List[V1DaemonSet]:
        return self._items("daemonsets", self.apps_v1.list_namespaced_daemon_set)

    def _items(self, kind: str, list_call, **kwargs) -> list:
        try:
            return list(list_call(self.namespace, **kwargs).items)
        except ApiException as e:
            logger.error(f"Failed to list {kind} in {self.namespace}: {e.status} {e.reason}")
            raise ResourceListingError(kind, self.namespace, f"{e.status} {e.reason}") from e
        except (HTTPError, OSError) as e:
            logger.error(f"Failed to reach API server listing {kind} in {self.namespace}: {e}")
            raise ResourceListingError(kind, self.namespace, str(e)) from e
