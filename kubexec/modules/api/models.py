"""
kubexec HTTP data models.

Request and response shapes for the REST surface. ExecutionOutcome itself
lives in the executor module and is returned as-is.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from kubexec.modules.discovery import UniquePods

# Request Models (API Input)


class ExecRequest(BaseModel):
    """Request to execute a command inside a container."""

    pod: str = Field(..., description="Target pod name", min_length=1, max_length=253)
    container: str = Field(..., description="Target container name", min_length=1, max_length=63)
    command: List[str] = Field(..., description="Argument vector", min_length=1)
    stdin: Optional[str] = Field(None, description="Text fed to the command's stdin")
    timeout_seconds: Optional[float] = Field(
        None, description="Execution deadline in seconds (server default when omitted)", gt=0, le=3600
    )


class FileRequest(BaseModel):
    """Request targeting a file inside a container."""

    pod: str = Field(..., min_length=1, max_length=253)
    container: str = Field(..., min_length=1, max_length=63)
    path: str = Field(..., min_length=1, description="Absolute path inside the container")


class UtilityRequest(BaseModel):
    """Request to check whether a utility is available in a container."""

    pod: str = Field(..., min_length=1, max_length=253)
    container: str = Field(..., min_length=1, max_length=63)
    utility: str = Field(..., min_length=1, description="Executable name, e.g. 'stat'")


# Response Models (API Output)


class FileContentResponse(BaseModel):
    """File content read from a container."""

    pod: str
    container: str
    path: str
    content: str


class CheckResponse(BaseModel):
    """Boolean probe verdict."""

    pod: str
    container: str
    subject: str
    result: bool


class PodSummary(BaseModel):
    """Identifying details of a representative pod."""

    name: str
    labels: Dict[str, str] = Field(default_factory=dict)
    containers: List[str] = Field(default_factory=list)


class SkippedGroupModel(BaseModel):
    kind: str
    name: str
    reason: str


class ConflictModel(BaseModel):
    pod: str
    groups: List[str]


class UniquePodsResponse(BaseModel):
    """Representative pods for the namespace."""

    total: int
    pods: List[PodSummary]
    skipped: List[SkippedGroupModel] = Field(default_factory=list)
    conflicts: List[ConflictModel] = Field(default_factory=list)
    complete: bool = True

    @classmethod
    def from_result(cls, result: UniquePods) -> "UniquePodsResponse":
        return cls(
            total=result.total,
            pods=[
                PodSummary(
                    name=pod.metadata.name,
                    labels=pod.metadata.labels or {},
                    containers=[c.name for c in ((pod.spec.containers if pod.spec else None) or [])],
                )
                for pod in result.pods
            ],
            skipped=[SkippedGroupModel(kind=s.kind, name=s.name, reason=s.reason) for s in result.skipped],
            conflicts=[ConflictModel(pod=c.pod, groups=c.groups) for c in result.conflicts],
            complete=result.complete,
        )


class UniqueImagesResponse(BaseModel):
    """Distinct container images in the namespace."""

    container_count: int
    images: List[str]
