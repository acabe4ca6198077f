"""
Discovery Module - Black Box Interface

Purpose: Find the distinct pods and images in a namespace
Interface: ResourceDeduplicator.unique_pods(), unique_images()
Hidden: Replica group enumeration, selector building, membership bookkeeping

Can be backed by any ResourceLister (API server, cache, fixtures).
"""

from .deduplicator import MembershipConflict, ResourceDeduplicator, SkippedGroup, UniquePods
from .lister import KubernetesResourceLister, ResourceLister
from .selectors import to_label_selector

__all__ = [
    "KubernetesResourceLister",
    "MembershipConflict",
    "ResourceDeduplicator",
    "ResourceLister",
    "SkippedGroup",
    "UniquePods",
    "to_label_selector",
]
