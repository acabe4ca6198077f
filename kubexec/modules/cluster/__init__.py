"""
Cluster Module - Black Box Interface

Purpose: Load Kubernetes client configuration and build API clients
Interface: load_cluster_clients()
Hidden: kubeconfig / in-cluster config resolution

Can be replaced with any factory that yields CoreV1Api and AppsV1Api clients.
"""

import logging
from dataclasses import dataclass

from kubernetes import client, config

from kubexec.config.provider import ClusterConfig

logger = logging.getLogger("kubexec.cluster")


@dataclass
class ClusterClients:
    """Kubernetes API clients bound to one namespace."""
    core_v1: client.CoreV1Api
    apps_v1: client.AppsV1Api
    namespace: str


def load_cluster_clients(cluster_config: ClusterConfig) -> ClusterClients:
    """
    Load Kubernetes configuration and create API clients.

    In-cluster config is used when requested; otherwise the given kubeconfig
    (or the default one) is loaded, falling back to in-cluster config when
    no kubeconfig can be found.
    """
    if cluster_config.in_cluster:
        config.load_incluster_config()
        logger.info("Loaded in-cluster Kubernetes config")
    else:
        try:
            config.load_kube_config(config_file=cluster_config.kubeconfig)
            logger.info(f"Loaded kubeconfig {cluster_config.kubeconfig or '(default)'}")
        except config.ConfigException:
            if cluster_config.kubeconfig:
                raise
            config.load_incluster_config()
            logger.info("No kubeconfig found, loaded in-cluster Kubernetes config")

    return ClusterClients(
        core_v1=client.CoreV1Api(),
        apps_v1=client.AppsV1Api(),
        namespace=cluster_config.namespace,
    )


__all__ = ["ClusterClients", "load_cluster_clients"]
