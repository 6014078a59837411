# src/kubeshift/models/application_clone.py

from enum import Enum
from typing import Any, Dict, List, Mapping

from pydantic import BaseModel, ConfigDict, Field

APPLICATION_CLONE_PLURAL = "applicationclones"


class ApplicationCloneStatusType(str, Enum):
    INITIAL = ""
    PENDING = "Pending"
    IN_PROGRESS = "InProgress"
    FAILED = "Failed"
    SUCCESS = "Success"
    PARTIAL_SUCCESS = "PartialSuccess"


class ApplicationCloneStageType(str, Enum):
    INITIAL = ""
    PRE_EXEC_RULE = "PreExecRule"
    POST_EXEC_RULE = "PostExecRule"
    VOLUME_CLONE = "VolumeClone"
    APPLICATION_CLONE = "ApplicationClone"
    DONE = "Done"


STAGE_ORDER = list(ApplicationCloneStageType)
FINAL_STATUSES = frozenset(
    (
        ApplicationCloneStatusType.FAILED,
        ApplicationCloneStatusType.SUCCESS,
        ApplicationCloneStatusType.PARTIAL_SUCCESS,
    )
)


class ApplicationCloneSpec(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    namespace_mapping: Dict[str, str] = Field(
        default_factory=dict, alias="namespaceMapping", description="Source namespace -> destination namespace"
    )
    selectors: Dict[str, str] = Field(default_factory=dict, description="Labels selecting the objects to clone")
    pre_exec_rule: str = Field("", alias="preExecRule")
    post_exec_rule: str = Field("", alias="postExecRule")


class ApplicationCloneStatus(BaseModel):
    status: ApplicationCloneStatusType = ApplicationCloneStatusType.INITIAL
    stage: ApplicationCloneStageType = ApplicationCloneStageType.INITIAL


class ApplicationClone(BaseModel):
    """
    Cloning of an application into other namespaces.

    The stage moves forward one step at a time through STAGE_ORDER; once the
    status is final the clone no longer changes.
    """

    name: str = ""
    namespace: str = ""
    spec: ApplicationCloneSpec = Field(default_factory=ApplicationCloneSpec)
    status: ApplicationCloneStatus = Field(default_factory=ApplicationCloneStatus)

    @classmethod
    def from_manifest(cls, manifest: Mapping[str, Any]) -> "ApplicationClone":
        metadata = manifest.get("metadata") or {}
        return cls(
            name=metadata.get("name", ""),
            namespace=metadata.get("namespace", ""),
            spec=ApplicationCloneSpec.model_validate(manifest.get("spec") or {}),
            status=ApplicationCloneStatus.model_validate(manifest.get("status") or {}),
        )

    @property
    def source_namespaces(self) -> List[str]:
        return list(self.spec.namespace_mapping)

    @property
    def is_complete(self) -> bool:
        return self.status.status in FINAL_STATUSES

    def advance(self) -> ApplicationCloneStageType:
        """Moves to the next stage, marking the clone successful when it reaches Done."""
        if self.is_complete:
            raise ValueError(f"ApplicationClone {self.namespace}/{self.name} is already {self.status.status.value}")
        if self.status.stage == ApplicationCloneStageType.DONE:
            raise ValueError(f"ApplicationClone {self.namespace}/{self.name} has no stage after Done")
        index = STAGE_ORDER.index(self.status.stage)
        self.status.stage = STAGE_ORDER[index + 1]
        if self.status.stage == ApplicationCloneStageType.DONE:
            self.status.status = ApplicationCloneStatusType.SUCCESS
        else:
            self.status.status = ApplicationCloneStatusType.IN_PROGRESS
        return self.status.stage

    def fail(self) -> None:
        self.status.status = ApplicationCloneStatusType.FAILED
