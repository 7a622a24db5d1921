"""
Request and result payloads for the Orthanc REST API.

Request payloads are option bags: every optional field defaults to None and
is left out of the encoded body, so ``Anonymization()`` is the request with
no options at all.
"""

import enum
from typing import Any

from pydantic import Field, field_validator

from .base import DicomDateTime, EntityKind, OptionalDicomDateTime, OrthancModel

# ==================== Server configuration ====================


class System(OrthancModel):
    """Server metadata returned by ``GET /system``."""

    name: str
    version: str
    api_version: int
    database_version: int
    database_backend_plugin: str | None = None
    dicom_aet: str
    dicom_port: int
    http_port: int
    is_http_server_secure: bool
    plugins_enabled: bool
    storage_area_plugin: str | None = None


class Modality(OrthancModel):
    """Remote DICOM modality, addressed by AE title, host and port."""

    aet: str = Field(alias="AET")
    host: str
    port: int
    manufacturer: str | None = None
    allow_c_echo: bool | None = Field(default=None, alias="AllowEcho")
    allow_c_find: bool | None = Field(default=None, alias="AllowFind")
    allow_c_get: bool | None = Field(default=None, alias="AllowGet")
    allow_c_move: bool | None = Field(default=None, alias="AllowMove")
    allow_c_store: bool | None = Field(default=None, alias="AllowStore")
    allow_n_action: bool | None = None
    allow_n_event_report: bool | None = Field(default=None, alias="AllowEventReport")
    allow_transcoding: bool | None = None


class Peer(OrthancModel):
    """Remote Orthanc peer, addressed over HTTP."""

    url: str
    username: str | None = None
    password: str | None = None
    http_headers: dict[str, str] | None = None
    certificate_file: str | None = None
    certificate_key_file: str | None = None
    certificate_key_password: str | None = None

    @field_validator("http_headers", mode="before")
    @classmethod
    def drop_header_names(cls, value: Any) -> Any:
        """Ignore the header list Orthanc returns in place of the header map."""
        if isinstance(value, dict):
            return value
        return None


# ==================== Request payloads ====================


class Anonymization(OrthancModel):
    """Anonymization request body."""

    replace: dict[str, str] | None = None
    keep: list[str] | None = None
    keep_private_tags: bool | None = None
    dicom_version: str | None = None
    force: bool | None = None


class Modification(OrthancModel):
    """Modification request body."""

    replace: dict[str, str] | None = None
    remove: list[str] | None = None
    force: bool | None = None


class Search(OrthancModel):
    """Request body of ``POST /tools/find``."""

    level: EntityKind
    query: dict[str, str]
    expand: bool | None = None


class ModalityFind(OrthancModel):
    """C-FIND request body."""

    level: EntityKind
    query: dict[str, str]
    normalize: bool | None = None


class ModalityMove(OrthancModel):
    """C-MOVE request body."""

    level: EntityKind
    target_aet: str | None = None
    resources: list[dict[str, str]]
    timeout: int | None = None


class ModalityRetrieve(OrthancModel):
    """Retrieve request body for the answers of a C-FIND query.

    With ``asynchronous`` set, Orthanc runs the retrieve as a job and answers
    with its handle.
    """

    target_aet: str
    asynchronous: bool | None = None


# ==================== Result payloads ====================


class Ancestor(OrthancModel):
    """Nearest entity left in place after a deletion."""

    id: str = Field(alias="ID")
    path: str
    entity: EntityKind = Field(alias="Type")


class RemainingAncestor(OrthancModel):
    """Response body of DELETE requests.

    A deleted study leaves its patient, a deleted instance leaves its series.
    Deleting a patient (or the last child of every ancestor) leaves nothing.
    """

    remaining_ancestor: Ancestor | None = None


class UploadResult(OrthancModel):
    """Result of a DICOM upload."""

    id: str = Field(alias="ID")
    status: str
    path: str
    parent_patient: str
    parent_study: str
    parent_series: str


class ModalityStoreResult(OrthancModel):
    """Result of a C-STORE request (sending entities to a modality)."""

    description: str
    local_aet: str
    remote_aet: str
    parent_resources: list[str]
    instances_count: int
    failed_instances_count: int


StoreResult = ModalityStoreResult


class PeerStoreResult(OrthancModel):
    """Result of sending entities to a peer."""

    description: str
    peer: list[str]
    parent_resources: list[str]
    instances_count: int
    failed_instances_count: int


class ModalityFindResult(OrthancModel):
    """Query handle created by a C-FIND request."""

    id: str = Field(alias="ID")
    path: str


class AsyncResult(OrthancModel):
    """Handle of a job started by an asynchronous request."""

    id: str = Field(alias="ID")
    path: str


class ModificationResult(OrthancModel):
    """Result of a modification or anonymization request."""

    id: str = Field(alias="ID")
    patient_id: str = Field(alias="PatientID")
    path: str
    entity: EntityKind = Field(alias="Type")


# ==================== Jobs ====================


class JobState(str, enum.Enum):
    PENDING = "Pending"
    RUNNING = "Running"
    SUCCESS = "Success"
    FAILURE = "Failure"
    PAUSED = "Paused"
    RETRY = "Retry"


class JobKind(str, enum.Enum):
    ARCHIVE = "Archive"
    RESOURCE_MODIFICATION = "ResourceModification"
    DICOM_MODALITY_STORE = "DicomModalityStore"
    DICOM_MOVE_SCU = "DicomMoveScu"


class Job(OrthancModel):
    """Asynchronous job."""

    id: str = Field(alias="ID")
    kind: JobKind = Field(alias="Type")
    state: JobState
    priority: int
    progress: int
    content: dict[str, Any] = {}
    timestamp: DicomDateTime
    creation_time: DicomDateTime
    completion_time: OptionalDicomDateTime = None
    effective_runtime: float
    error_code: int
    error_description: str
