import logging
from collections import Counter, defaultdict
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Tuple

from kubexec.errors import ResourceListingError

from .lister import ResourceLister
from .selectors import group_match_labels, to_label_selector

logger = logging.getLogger("kubexec.discovery")


@dataclass
class SkippedGroup:
    """A replica group whose members could not be determined."""

    kind: str
    name: str
    reason: str


@dataclass
class MembershipConflict:
    """A pod matched by the selectors of more than one replica group."""

    pod: str
    groups: List[str]


@dataclass
class UniquePods:
    """
    Representative pods for a namespace.

    ``total`` is the number of pods actually listed in the namespace.
    ``pods`` holds one pod per non-empty replica group (first-seen order)
    followed by every pod that belongs to no group.
    """

    total: int
    pods: list = field(default_factory=list)
    skipped: List[SkippedGroup] = field(default_factory=list)
    conflicts: List[MembershipConflict] = field(default_factory=list)

    @property
    def pod_names(self) -> List[str]:
        return [pod.metadata.name for pod in self.pods]

    @property
    def complete(self) -> bool:
        """True when every replica group was resolved."""
        return not self.skipped


class ResourceDeduplicator:
    """
    Reduces a namespace to the pods worth targeting.

    Replicas created from the same template are interchangeable, so one pod
    per Deployment, StatefulSet and DaemonSet is enough; standalone pods are
    kept as they are. Results are a fresh snapshot on every call.

    Known limitation: a pod matched by selectors of two different groups is
    counted for both, and each group contributes its own representative.
    Such pods are reported in UniquePods.conflicts rather than resolved.
    """

    def __init__(self, lister: ResourceLister):
        self.lister = lister

    def _group_kinds(self) -> List[Tuple[str, Callable[[], list]]]:
        return [
            ("Deployment", self.lister.list_deployments),
            ("StatefulSet", self.lister.list_stateful_sets),
            ("DaemonSet", self.lister.list_daemon_sets),
        ]

    def unique_pods(self) -> UniquePods:
        """
        Find one representative pod per replica group plus ungrouped pods.

        Logic:
        1. For each group kind, list the groups and the pods matching each
           group's selector; keep the first match, remember all matches
        2. List every pod in the namespace (ground truth)
        3. Append pods that no group claimed

        Raises:
            ResourceListingError: Listing the groups of a kind, or the final
                pod listing, failed. A failure listing one group's pods is
                recorded in ``skipped`` instead.
        """
        representatives = []
        skipped: List[SkippedGroup] = []
        memberships: Dict[str, Counter] = {}
        owners: Dict[str, List[str]] = defaultdict(list)

        for kind, list_groups in self._group_kinds():
            members: Counter = Counter()
            for group in list_groups():
                name = group.metadata.name
                match_labels = group_match_labels(group)
                if not match_labels:
                    # An empty selector would match every pod in the namespace
                    skipped.append(SkippedGroup(kind, name, "selector has no matchLabels"))
                    logger.warning(f"Skipping {kind}/{name}: selector has no matchLabels")
                    continue

                try:
                    pods = self.lister.list_pods(to_label_selector(match_labels))
                except ResourceListingError as e:
                    skipped.append(SkippedGroup(kind, name, e.reason))
                    logger.warning(f"Skipping {kind}/{name}: {e}")
                    continue

                if pods:
                    representatives.append(pods[0])
                for pod in pods:
                    members[pod.metadata.name] += 1
                    owners[pod.metadata.name].append(f"{kind}/{name}")

            memberships[kind] = members

        all_pods = self.lister.list_pods()
        for pod in all_pods:
            if any(pod.metadata.name in members for members in memberships.values()):
                continue
            representatives.append(pod)

        conflicts = [
            MembershipConflict(pod=pod_name, groups=groups)
            for pod_name, groups in owners.items()
            if len(groups) > 1
        ]
        for conflict in conflicts:
            logger.warning(f"Pod {conflict.pod} is matched by several groups: {', '.join(conflict.groups)}")

        return UniquePods(
            total=len(all_pods),
            pods=representatives,
            skipped=skipped,
            conflicts=conflicts,
        )

    def unique_images(self) -> Tuple[int, List[str]]:
        """
        Collect container images used in the namespace.

        Returns:
            (number of containers across all pods, distinct images in first-seen order)

        Raises:
            ResourceListingError: Listing pods failed
        """
        container_count = 0
        images: List[str] = []
        seen = set()

        for pod in self.lister.list_pods():
            containers = (pod.spec.containers if pod.spec else None) or []
            container_count += len(containers)
            for container in containers:
                if container.image in seen:
                    continue
                seen.add(container.image)
                images.append(container.image)

        return container_count, images
