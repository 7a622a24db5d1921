"""
Orthanc client - Python client for the Orthanc DICOM server REST API.
"""

from .client import Client
from .exceptions import (
    ApiError,
    OrthancConnectionError,
    OrthancDecodeError,
    OrthancError,
    OrthancSinkError,
)
from .models import (
    Ancestor,
    Anonymization,
    AsyncResult,
    Entity,
    EntityBase,
    EntityKind,
    Instance,
    Job,
    JobKind,
    JobState,
    Modality,
    ModalityFind,
    ModalityFindResult,
    ModalityMove,
    ModalityRetrieve,
    ModalityStoreResult,
    Modification,
    ModificationResult,
    Patient,
    Peer,
    PeerStoreResult,
    RemainingAncestor,
    Search,
    Series,
    StoreResult,
    Study,
    System,
    UploadResult,
)
from .settings import Settings, get_settings

__version__ = "0.1.0"

__all__ = [
    # Client
    "Client",
    "Settings",
    "get_settings",
    # Errors
    "ApiError",
    "OrthancConnectionError",
    "OrthancDecodeError",
    "OrthancError",
    "OrthancSinkError",
    # Entities
    "Entity",
    "EntityBase",
    "EntityKind",
    "Instance",
    "Patient",
    "Series",
    "Study",
    # Payloads
    "Ancestor",
    "Anonymization",
    "AsyncResult",
    "Job",
    "JobKind",
    "JobState",
    "Modality",
    "ModalityFind",
    "ModalityFindResult",
    "ModalityMove",
    "ModalityRetrieve",
    "ModalityStoreResult",
    "Modification",
    "ModificationResult",
    "Peer",
    "PeerStoreResult",
    "RemainingAncestor",
    "Search",
    "StoreResult",
    "System",
    "UploadResult",
]
