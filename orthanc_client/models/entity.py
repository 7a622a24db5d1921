"""
Entity models for the Orthanc client.

Orthanc exposes four entity kinds, matching the DICOM hierarchy: Patient,
Study, Series and Instance. They form a closed union discriminated by the
``Type`` field; capabilities that differ per kind are resolved with an
exhaustive match over the four variants.
"""

from typing import Annotated, ClassVar, Literal

from pydantic import Field

from .base import DicomDateTime, EntityKind, OrthancModel


class EntityBase(OrthancModel):
    """Fields and capabilities shared by every entity kind."""

    KIND: ClassVar[EntityKind]

    id: str = Field(alias="ID")
    main_dicom_tags: dict[str, str] = {}
    anonymized_from: str | None = None

    @classmethod
    def kind(cls) -> EntityKind:
        """Entity kind of this variant."""
        return cls.KIND

    @property
    def parent_id(self) -> str | None:
        """ID of the parent entity, None for a patient."""
        match self:
            case Patient():
                return None
            case Study():
                return self.parent_patient
            case Series():
                return self.parent_study
            case Instance():
                return self.parent_series
        raise TypeError(f"Unknown entity variant: {type(self).__name__}")

    @property
    def parent_kind(self) -> EntityKind | None:
        """Kind of the parent entity, None for a patient."""
        return self.kind().parent

    @property
    def parent_kind_name(self) -> str | None:
        """Name of the parent entity kind, e.g. ``Study``."""
        parent = self.parent_kind
        return parent.value if parent is not None else None

    @property
    def children(self) -> list[str]:
        """IDs of the child entities, empty for an instance."""
        match self:
            case Patient():
                return self.studies
            case Study():
                return self.series
            case Series():
                return self.instances
            case Instance():
                return []
        raise TypeError(f"Unknown entity variant: {type(self).__name__}")

    @property
    def children_len(self) -> int:
        return len(self.children)

    @property
    def children_kind_name(self) -> str | None:
        """Pluralized label of the child collection, None for an instance."""
        match self:
            case Patient():
                return "Studies"
            case Study():
                return "Series"
            case Series():
                return "Instances"
            case Instance():
                return None
        raise TypeError(f"Unknown entity variant: {type(self).__name__}")

    @property
    def index(self) -> int | None:
        """Index of an instance in its series, None for other kinds."""
        if isinstance(self, Instance):
            return self.index_in_series
        return None

    @property
    def size(self) -> int:
        """Size of an instance file, 0 for other kinds."""
        if isinstance(self, Instance):
            return self.file_size
        return 0

    def main_dicom_tag(self, tag: str) -> str | None:
        """Get the value of a DICOM tag from ``main_dicom_tags``.

        Studies also look into the patient tags Orthanc copies onto the study
        document. No other kind falls back to its parent.

        Args:
            tag: DICOM tag name, e.g. ``PatientID``

        Returns:
            Tag value or None if the tag is absent
        """
        value = self.main_dicom_tags.get(tag)
        if value is None and isinstance(self, Study):
            return self.patient_main_dicom_tags.get(tag)
        return value


class Patient(EntityBase):
    """Patient, the root of the hierarchy."""

    KIND: ClassVar[EntityKind] = EntityKind.PATIENT

    is_stable: bool
    last_update: DicomDateTime
    studies: list[str] = []
    entity: Literal[EntityKind.PATIENT] = Field(default=EntityKind.PATIENT, alias="Type")


class Study(EntityBase):
    """Study. Carries a copy of the parent patient's main DICOM tags."""

    KIND: ClassVar[EntityKind] = EntityKind.STUDY

    is_stable: bool
    last_update: DicomDateTime
    parent_patient: str
    patient_main_dicom_tags: dict[str, str] = {}
    series: list[str] = []
    entity: Literal[EntityKind.STUDY] = Field(default=EntityKind.STUDY, alias="Type")


class Series(EntityBase):
    """Series"""

    KIND: ClassVar[EntityKind] = EntityKind.SERIES

    status: str
    is_stable: bool
    last_update: DicomDateTime
    parent_study: str
    expected_number_of_instances: int | None = None
    instances: list[str] = []
    entity: Literal[EntityKind.SERIES] = Field(default=EntityKind.SERIES, alias="Type")


class Instance(EntityBase):
    """Instance, a single DICOM file and the leaf of the hierarchy."""

    KIND: ClassVar[EntityKind] = EntityKind.INSTANCE

    parent_series: str
    index_in_series: int | None = None
    file_uuid: str
    file_size: int
    modified_from: str | None = None
    entity: Literal[EntityKind.INSTANCE] = Field(default=EntityKind.INSTANCE, alias="Type")


Entity = Annotated[Patient | Study | Series | Instance, Field(discriminator="entity")]

ENTITY_MODELS: dict[EntityKind, type[EntityBase]] = {
    EntityKind.PATIENT: Patient,
    EntityKind.STUDY: Study,
    EntityKind.SERIES: Series,
    EntityKind.INSTANCE: Instance,
}
