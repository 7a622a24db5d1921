"""
Orthanc client data models.

This package contains the pydantic models for the Orthanc entity hierarchy
and for the request and response bodies of the REST API.
"""

# Base models
from .base import DicomDateTime, EntityKind, OptionalDicomDateTime, OrthancModel

# Entity models
from .entity import ENTITY_MODELS, Entity, EntityBase, Instance, Patient, Series, Study

# Payloads
from .payloads import (
    Ancestor,
    Anonymization,
    AsyncResult,
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
    Peer,
    PeerStoreResult,
    RemainingAncestor,
    Search,
    StoreResult,
    System,
    UploadResult,
)

__all__ = [
    # Base
    "DicomDateTime",
    "EntityKind",
    "OptionalDicomDateTime",
    "OrthancModel",
    # Entities
    "ENTITY_MODELS",
    "Entity",
    "EntityBase",
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
