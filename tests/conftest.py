"""
Shared pytest fixtures for kubexec tests.

This module provides common fixtures including:
- FakeExecChannel: Mock remote exec streams with canned responses
- FakeResourceLister: In-memory namespace with pods and replica groups
- Kubernetes model builders for pods and groups
"""

import os
import sys
import time
from dataclasses import dataclass
from typing import Dict, List, Optional, Pattern, Sequence, Union

import pytest
from kubernetes.client import (
    V1Container,
    V1DaemonSet,
    V1DaemonSetSpec,
    V1Deployment,
    V1DeploymentSpec,
    V1LabelSelector,
    V1LabelSelectorRequirement,
    V1ObjectMeta,
    V1Pod,
    V1PodSpec,
    V1PodTemplateSpec,
    V1StatefulSet,
    V1StatefulSetSpec,
)

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from kubexec.errors import CodeExitError, ResourceListingError
from kubexec.modules.executor.channel import read_stdin


# =============================================================================
# Exec Channel Mocking Infrastructure
# =============================================================================

@dataclass
class ExecResponse:
    """Represents a mocked remote command response."""
    stdout: str = ""
    stderr: str = ""
    exit_code: int = 0
    error: Optional[Exception] = None
    hang: bool = False

    def play(self, ctx, stdout, stderr) -> None:
        """Write output, then end the stream the way the response describes."""
        stdout.write(self.stdout)
        stderr.write(self.stderr)
        if self.hang:
            # Keep the stream open until the context ends
            while True:
                ctx.raise_if_done()
                time.sleep(0.005)
        if self.error is not None:
            raise self.error
        if self.exit_code:
            raise CodeExitError(self.exit_code)


@dataclass
class ExecCall:
    """Record of a remote exec made during testing."""
    pod: str
    container: str
    command: List[str]
    command_str: str
    stdin: str = ""
    matched_pattern: Optional[str] = None
    response: Optional[ExecResponse] = None


class FakeExecChannel:
    """
    Mock remote exec channel with pattern-matched responses.

    Patterns are matched against the space-joined argument vector.

    Usage:
        def test_read(exec_channel, gateway):
            exec_channel.register("cat /etc/hosts", ExecResponse(stdout="127.0.0.1 localhost"))
            outcome = gateway.execute("web-0", "app", ["cat", "/etc/hosts"])
            assert exec_channel.was_called_with("cat /etc/hosts")
    """

    def __init__(self):
        self._responses: List[tuple] = []
        self._call_history: List[ExecCall] = []
        self._default_response = ExecResponse(
            stderr="exec: executable file not found in $PATH",
            exit_code=127,
        )

    def register(
        self,
        pattern: Union[str, Pattern],
        response: ExecResponse,
        priority: int = 0,
    ) -> "FakeExecChannel":
        """
        Register a response for commands matching the pattern.

        Args:
            pattern: String (substring match) or regex pattern
            response: ExecResponse to play when matched
            priority: Higher priority patterns are checked first

        Returns:
            self for chaining
        """
        self._responses.append((pattern, response, priority))
        self._responses.sort(key=lambda x: x[2], reverse=True)
        return self

    def register_scenario(self, scenario_name: str) -> "FakeExecChannel":
        """Register all responses for a named container scenario."""
        from fixtures.container_scenarios import SCENARIOS

        if scenario_name not in SCENARIOS:
            raise ValueError(
                f"Unknown scenario: {scenario_name}. "
                f"Available: {list(SCENARIOS.keys())}"
            )

        for pattern, response in SCENARIOS[scenario_name].items():
            self.register(pattern, response)

        return self

    def set_default_response(self, response: ExecResponse) -> "FakeExecChannel":
        """Set the default response for unmatched commands."""
        self._default_response = response
        return self

    def stream(self, ctx, pod, container, command, stdin, stdout, stderr) -> None:
        """RemoteExecChannel implementation."""
        ctx.raise_if_done()

        cmd_str = " ".join(command)
        matched_pattern = None
        response = self._default_response

        for pattern, resp, _ in self._responses:
            if isinstance(pattern, str):
                if pattern in cmd_str:
                    matched_pattern = pattern
                    response = resp
                    break
            elif pattern.search(cmd_str):
                matched_pattern = pattern.pattern
                response = resp
                break

        self._call_history.append(
            ExecCall(
                pod=pod,
                container=container,
                command=list(command),
                command_str=cmd_str,
                stdin=read_stdin(stdin),
                matched_pattern=matched_pattern,
                response=response,
            )
        )

        response.play(ctx, stdout, stderr)

    @property
    def calls(self) -> List[ExecCall]:
        """Get all exec calls made during the test."""
        return self._call_history

    @property
    def call_count(self) -> int:
        return len(self._call_history)

    def was_called_with(self, pattern: str) -> bool:
        """Check if any call contained the given pattern."""
        return any(pattern in call.command_str for call in self._call_history)

    def get_calls_matching(self, pattern: str) -> List[ExecCall]:
        return [c for c in self._call_history if pattern in c.command_str]

    def reset(self):
        """Clear call history (but keep registered responses)."""
        self._call_history = []


# =============================================================================
# Kubernetes Model Builders
# =============================================================================

def make_pod(name: str, labels: Optional[Dict[str, str]] = None, images: Sequence[str] = ("nginx:1.25",)) -> V1Pod:
    """Build a pod with one container per image."""
    return V1Pod(
        metadata=V1ObjectMeta(name=name, labels=dict(labels or {})),
        spec=V1PodSpec(
            containers=[V1Container(name=f"c{i}", image=image) for i, image in enumerate(images)]
        ),
    )


def _selector(match_labels: Optional[Dict[str, str]]) -> V1LabelSelector:
    if match_labels:
        return V1LabelSelector(match_labels=dict(match_labels))
    return V1LabelSelector(
        match_expressions=[V1LabelSelectorRequirement(key="app", operator="Exists")]
    )


def make_deployment(name: str, match_labels: Optional[Dict[str, str]]) -> V1Deployment:
    return V1Deployment(
        metadata=V1ObjectMeta(name=name),
        spec=V1DeploymentSpec(selector=_selector(match_labels), template=V1PodTemplateSpec()),
    )


def make_stateful_set(name: str, match_labels: Optional[Dict[str, str]]) -> V1StatefulSet:
    return V1StatefulSet(
        metadata=V1ObjectMeta(name=name),
        spec=V1StatefulSetSpec(
            selector=_selector(match_labels), template=V1PodTemplateSpec(), service_name=name
        ),
    )


def make_daemon_set(name: str, match_labels: Optional[Dict[str, str]]) -> V1DaemonSet:
    return V1DaemonSet(
        metadata=V1ObjectMeta(name=name),
        spec=V1DaemonSetSpec(selector=_selector(match_labels), template=V1PodTemplateSpec()),
    )


def parse_selector(selector: str) -> Dict[str, str]:
    """Parse a key=value,key=value selector."""
    pairs = [part.split("=", 1) for part in selector.split(",") if part]
    return {key: value for key, value in pairs}


class FakeResourceLister:
    """
    In-memory namespace implementing the ResourceLister protocol.

    Failures can be injected per label selector (one group's member
    lookup) or per kind (a whole listing call).
    """

    def __init__(self, namespace: str = "default"):
        self.namespace = namespace
        self.pods: List[V1Pod] = []
        self.deployments: List[V1Deployment] = []
        self.stateful_sets: List[V1StatefulSet] = []
        self.daemon_sets: List[V1DaemonSet] = []
        self.failing_selectors: set = set()
        self.failing_kinds: set = set()
        self.selector_queries: List[Optional[str]] = []

    def add_pod(self, name, labels=None, images=("nginx:1.25",)) -> V1Pod:
        pod = make_pod(name, labels, images)
        self.pods.append(pod)
        return pod

    def list_pods(self, label_selector: Optional[str] = None) -> List[V1Pod]:
        self.selector_queries.append(label_selector)
        if label_selector and label_selector in self.failing_selectors:
            raise ResourceListingError("pods", self.namespace, "500 Internal Server Error")
        if not label_selector and "pods" in self.failing_kinds:
            raise ResourceListingError("pods", self.namespace, "403 Forbidden")
        if not label_selector:
            return list(self.pods)
        wanted = parse_selector(label_selector)
        return [
            pod for pod in self.pods
            if all((pod.metadata.labels or {}).get(k) == v for k, v in wanted.items())
        ]

    def list_deployments(self) -> List[V1Deployment]:
        return self._groups("deployments", self.deployments)

    def list_stateful_sets(self) -> List[V1StatefulSet]:
        return self._groups("statefulsets", self.stateful_sets)

    def list_daemon_sets(self) -> List[V1DaemonSet]:
        return self._groups("daemonsets", self.daemon_sets)

    def _groups(self, kind: str, items: list) -> list:
        if kind in self.failing_kinds:
            raise ResourceListingError(kind, self.namespace, "403 Forbidden")
        return list(items)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def exec_channel():
    """Fresh FakeExecChannel; unmatched commands exit 127."""
    return FakeExecChannel()


@pytest.fixture
def gateway(exec_channel):
    """ExecutionGateway wired to the fake channel."""
    from kubexec.modules.executor import ExecutionGateway

    return ExecutionGateway(exec_channel, default_timeout=5.0)


@pytest.fixture
def resource_lister():
    """Empty in-memory namespace."""
    return FakeResourceLister()
