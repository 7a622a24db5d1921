"""Tests for the wire models: timestamps, option bags, result records."""

from datetime import datetime

import pytest
from pydantic import TypeAdapter, ValidationError

from orthanc_client.models import (
    Anonymization,
    Entity,
    EntityKind,
    Instance,
    Job,
    JobState,
    Modality,
    ModalityMove,
    ModalityRetrieve,
    Modification,
    ModificationResult,
    Patient,
    Peer,
    RemainingAncestor,
    Search,
    Series,
    StoreResult,
    Study,
)
from orthanc_client.models.base import format_datetime, parse_datetime

# ===================================================================
# Timestamps
# ===================================================================


class TestDateTime:
    """Tests for the compact Orthanc timestamp codec."""

    def test_parse_seconds(self):
        assert parse_datetime("20200101T154617") == datetime(2020, 1, 1, 15, 46, 17)

    def test_parse_microseconds(self):
        assert parse_datetime("20200101T154617.123456") == datetime(
            2020, 1, 1, 15, 46, 17, 123456
        )

    def test_equivalent_instants(self):
        assert parse_datetime("20200101T154617") == parse_datetime("20200101T154617.000000")

    def test_parse_invalid(self):
        with pytest.raises(ValueError):
            parse_datetime("2020-01-01 15:46:17")

    def test_format_drops_microseconds(self):
        assert format_datetime(datetime(2020, 1, 1, 15, 46, 17, 123456)) == "20200101T154617"

    def test_model_field_roundtrip(self, patient_json):
        patient = Patient.model_validate(patient_json)

        assert patient.last_update == datetime(2020, 1, 1, 15, 46, 17)
        assert patient.to_wire()["LastUpdate"] == "20200101T154617"

    def test_model_field_rejects_garbage(self, patient_json):
        patient_json["LastUpdate"] = "yesterday"

        with pytest.raises(ValidationError):
            Patient.model_validate(patient_json)


# ===================================================================
# Entity kinds
# ===================================================================


class TestEntityKind:
    """Tests for the EntityKind hierarchy helpers."""

    def test_hierarchy(self):
        assert EntityKind.PATIENT.parent is None
        assert EntityKind.STUDY.parent == EntityKind.PATIENT
        assert EntityKind.INSTANCE.parent == EntityKind.SERIES
        assert EntityKind.PATIENT.child == EntityKind.STUDY
        assert EntityKind.INSTANCE.child is None

    def test_path_segments(self):
        assert [k.path_segment for k in EntityKind] == [
            "patients",
            "studies",
            "series",
            "instances",
        ]

    def test_wire_value(self):
        assert EntityKind("Series") is EntityKind.SERIES
        assert TypeAdapter(EntityKind).dump_python(EntityKind.STUDY, mode="json") == "Study"

    def test_discriminated_union(self, patient_json, study_json, series_json, instance_json):
        adapter = TypeAdapter(list[Entity])

        entities = adapter.validate_python([patient_json, study_json, series_json, instance_json])

        assert [type(e) for e in entities] == [Patient, Study, Series, Instance]

    def test_variant_rejects_foreign_type(self, study_json):
        with pytest.raises(ValidationError):
            Patient.model_validate(study_json)


# ===================================================================
# Request payloads
# ===================================================================


class TestRequestPayloads:
    """Tests for the JSON form of request bodies."""

    def test_empty_anonymization(self):
        assert Anonymization().to_wire() == {}

    def test_anonymization(self):
        anon = Anonymization(
            replace={"PatientName": "Anonymous"},
            keep=["StudyDescription"],
            keep_private_tags=True,
            dicom_version="2017c",
            force=False,
        )

        assert anon.to_wire() == {
            "Replace": {"PatientName": "Anonymous"},
            "Keep": ["StudyDescription"],
            "KeepPrivateTags": True,
            "DicomVersion": "2017c",
            "Force": False,
        }

    def test_modification_omits_unset(self):
        mod = Modification(replace={"Tag1": "value1"}, remove=["Tag2"])

        assert mod.to_wire() == {"Replace": {"Tag1": "value1"}, "Remove": ["Tag2"]}

    def test_search(self):
        search = Search(level=EntityKind.STUDY, query={"StudyID": "1742"}, expand=True)

        assert search.to_wire() == {
            "Level": "Study",
            "Query": {"StudyID": "1742"},
            "Expand": True,
        }

    def test_modality_move(self):
        move = ModalityMove(
            level=EntityKind.STUDY,
            target_aet="MODALITY_TWO",
            resources=[{"StudyInstanceUID": "99.88.77.66.5.4.3.2.1.0"}],
        )

        assert move.to_wire() == {
            "Level": "Study",
            "TargetAet": "MODALITY_TWO",
            "Resources": [{"StudyInstanceUID": "99.88.77.66.5.4.3.2.1.0"}],
        }

    def test_modality_retrieve(self):
        assert ModalityRetrieve(target_aet="ORTHANC").to_wire() == {"TargetAet": "ORTHANC"}
        assert ModalityRetrieve(target_aet="ORTHANC", asynchronous=True).to_wire() == {
            "TargetAet": "ORTHANC",
            "Asynchronous": True,
        }

    def test_modality(self):
        modality = Modality(aet="FOO", host="localhost", port=11114, allow_c_echo=True)

        assert modality.to_wire() == {
            "AET": "FOO",
            "Host": "localhost",
            "Port": 11114,
            "AllowEcho": True,
        }

    def test_models_are_frozen(self):
        mod = Modification(force=True)

        with pytest.raises(ValidationError):
            mod.force = False


# ===================================================================
# Result payloads
# ===================================================================


class TestResultPayloads:
    """Tests for decoding response bodies."""

    def test_peer_ignores_header_names(self):
        peer = Peer.model_validate(
            {
                "HttpHeaders": ["Bar", "Foo"],
                "Password": None,
                "Pkcs11": False,
                "Url": "http://orthanc_peer:8029/",
                "Username": "orthanc",
            }
        )

        assert peer == Peer(url="http://orthanc_peer:8029/", username="orthanc")
        assert peer.http_headers is None

    def test_peer_sends_header_map(self):
        peer = Peer(url="http://peer/", http_headers={"Foo": "foo"})

        assert peer.to_wire() == {"Url": "http://peer/", "HttpHeaders": {"Foo": "foo"}}

    def test_modality_extended_flags(self):
        modality = Modality.model_validate(
            {
                "AET": "FOO",
                "AllowEcho": True,
                "AllowNAction": False,
                "AllowEventReport": False,
                "AllowTranscoding": False,
                "Host": "localhost",
                "Manufacturer": "Generic",
                "Port": 11114,
            }
        )

        assert modality.allow_c_echo is True
        assert modality.allow_n_action is False
        assert modality.allow_n_event_report is False
        assert modality.allow_c_find is None

    def test_remaining_ancestor(self):
        resp = RemainingAncestor.model_validate(
            {"RemainingAncestor": {"ID": "bar", "Path": "/patients/bar", "Type": "Patient"}}
        )

        assert resp.remaining_ancestor is not None
        assert resp.remaining_ancestor.id == "bar"
        assert resp.remaining_ancestor.entity == EntityKind.PATIENT

    def test_remaining_ancestor_null(self):
        assert RemainingAncestor.model_validate({"RemainingAncestor": None}).remaining_ancestor is None

    def test_modification_result(self):
        resp = ModificationResult.model_validate(
            {
                "ID": "86a3054b",
                "Path": "/studies/86a3054b",
                "PatientID": "2b5a3aaf",
                "Type": "Study",
            }
        )

        assert resp == ModificationResult(
            id="86a3054b", patient_id="2b5a3aaf", path="/studies/86a3054b", entity=EntityKind.STUDY
        )

    def test_store_result_alias(self):
        result = StoreResult.model_validate(
            {
                "Description": "REST API",
                "FailedInstancesCount": 17,
                "InstancesCount": 42,
                "LocalAet": "US",
                "ParentResources": ["bar", "baz", "qux"],
                "RemoteAet": "THEM",
            }
        )

        assert result.instances_count == 42
        assert result.failed_instances_count == 17

    def test_job(self):
        job = Job.model_validate(
            {
                "CompletionTime": "20201021T090000.123000",
                "Content": {"Description": "REST API"},
                "CreationTime": "20201021T085959.000000",
                "EffectiveRuntime": 0.35,
                "ErrorCode": 0,
                "ErrorDescription": "Success",
                "ID": "8b9e4b2c",
                "Priority": 0,
                "Progress": 100,
                "State": "Success",
                "Timestamp": "20201021T090001.000000",
                "Type": "DicomModalityStore",
            }
        )

        assert job.state == JobState.SUCCESS
        assert job.completion_time == datetime(2020, 10, 21, 9, 0, 0, 123000)
