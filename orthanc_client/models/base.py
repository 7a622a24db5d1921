"""
Base models for the Orthanc client.

This module provides the base pydantic model shared by every wire record,
the EntityKind enumeration and the compact timestamp codec used by Orthanc.
"""

import enum
from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_pascal

DATETIME_FORMAT = "%Y%m%dT%H%M%S"
DATETIME_FORMAT_MKS = "%Y%m%dT%H%M%S.%f"


def parse_datetime(value: Any) -> Any:
    """Parse an Orthanc timestamp.

    Orthanc writes timestamps without delimiters, either with seconds precision
    (``20200101T154617``) or with microseconds (``20200101T154617.123456``).

    Args:
        value: Raw value from the wire

    Returns:
        Parsed datetime, or the value unchanged if it is not a string
    """
    if not isinstance(value, str):
        return value
    try:
        return datetime.strptime(value, DATETIME_FORMAT)
    except ValueError:
        return datetime.strptime(value, DATETIME_FORMAT_MKS)


def format_datetime(value: datetime) -> str:
    """Format a datetime in the seconds-precision Orthanc form."""
    return value.strftime(DATETIME_FORMAT)


DicomDateTime = Annotated[
    datetime,
    BeforeValidator(parse_datetime),
    PlainSerializer(format_datetime, return_type=str),
]

OptionalDicomDateTime = Annotated[
    datetime | None,
    BeforeValidator(parse_datetime),
    PlainSerializer(lambda v: format_datetime(v) if v is not None else None),
]


class OrthancModel(BaseModel):
    """Base model for all Orthanc wire records.

    Field names are snake_case in Python and PascalCase on the wire. Fields whose
    wire name does not follow the plain PascalCase rule (``ID``, ``Type``, ...)
    declare an explicit alias.
    """

    model_config = ConfigDict(
        alias_generator=to_pascal,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    def to_wire(self) -> dict[str, Any]:
        """Encode the record into its JSON wire form, omitting unset optionals."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class EntityKind(str, enum.Enum):
    """Orthanc entity kinds.

    In descending hierarchical order: Patient, Study, Series, Instance.
    """

    PATIENT = "Patient"
    STUDY = "Study"
    SERIES = "Series"
    INSTANCE = "Instance"

    @property
    def depth(self) -> int:
        """Position in the hierarchy, 0 for Patient."""
        return _HIERARCHY.index(self)

    @property
    def parent(self) -> "EntityKind | None":
        """Kind of the parent entity, None for Patient."""
        if self.depth == 0:
            return None
        return _HIERARCHY[self.depth - 1]

    @property
    def child(self) -> "EntityKind | None":
        """Kind of the child entity, None for Instance."""
        if self.depth == len(_HIERARCHY) - 1:
            return None
        return _HIERARCHY[self.depth + 1]

    @property
    def path_segment(self) -> str:
        """REST collection name, e.g. ``studies``."""
        return _PATH_SEGMENTS[self]


_HIERARCHY = (EntityKind.PATIENT, EntityKind.STUDY, EntityKind.SERIES, EntityKind.INSTANCE)

_PATH_SEGMENTS = {
    EntityKind.PATIENT: "patients",
    EntityKind.STUDY: "studies",
    EntityKind.SERIES: "series",
    EntityKind.INSTANCE: "instances",
}
