"""Global configuration for the Orthanc client tests."""

import json
from collections.abc import Generator
from typing import Any

import httpx
import pytest

from orthanc_client import Client

SERVER = "http://orthanc.test"


class MockServer:
    """In-process Orthanc stand-in served through httpx.MockTransport.

    Routes are keyed by method and raw path (query included). Unknown routes
    answer 404 with an empty body. Every request is recorded.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], httpx.Response] = {}
        self.requests: list[httpx.Request] = []

    def add(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        content: bytes | str = b"",
        status_code: int = 200,
    ) -> None:
        if json is not None:
            response = httpx.Response(status_code, json=json)
        else:
            response = httpx.Response(status_code, content=content)
        self.routes[(method, path)] = response

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.raw_path.decode())
        response = self.routes.get(key)
        if response is None:
            return httpx.Response(404)
        return httpx.Response(
            response.status_code, headers=response.headers, content=response.content
        )

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last_request.content)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def server() -> MockServer:
    """Empty mock server."""
    return MockServer()


@pytest.fixture
def client(server: MockServer) -> Generator[Client, None, None]:
    """Client without credentials wired to the mock server."""
    with Client(SERVER, transport=server.transport()) as cl:
        yield cl


# ==================== Sample documents ====================


@pytest.fixture
def patient_json() -> dict[str, Any]:
    return {
        "ID": "f88cbd3f-a00dfc59-9ca1ac2d-7ce9851a-40e5b493",
        "IsStable": True,
        "LastUpdate": "20200101T154617",
        "MainDicomTags": {
            "OtherPatientIDs": "",
            "PatientBirthDate": "19670101",
            "PatientID": "123456789",
            "PatientName": "Rick Sanchez",
            "PatientSex": "M",
        },
        "Studies": ["e8cafcbe-caf08c39-6e205f15-18554bb8-b3f9ef04"],
        "Type": "Patient",
    }


@pytest.fixture
def study_json() -> dict[str, Any]:
    return {
        "ID": "63bf5d42-b5382159-01971752-e0ceea3d-399bbca5",
        "IsStable": True,
        "LastUpdate": "20200830T191109",
        "MainDicomTags": {
            "AccessionNumber": "foobar",
            "StudyDate": "20110101",
            "StudyDescription": "Brain",
            "StudyID": "1742",
            "StudyInstanceUID": "1.2.3.4.5.6789",
            "StudyTime": "084707",
        },
        "ParentPatient": "7e43f8d3-e50280e6-470079e9-02241af1-d286bdbe",
        "PatientMainDicomTags": {
            "PatientBirthDate": "19440101",
            "PatientID": "c137",
            "PatientName": "Rick Sanchez",
            "PatientSex": "M",
        },
        "Series": [
            "cd00fffc-db25be29-0c6da430-c56796a5-ba06933c",
            "2ab7dbe7-f1a18a78-86145443-18a8ff93-0b65f2b2",
        ],
        "Type": "Study",
    }


@pytest.fixture
def series_json() -> dict[str, Any]:
    return {
        "ExpectedNumberOfInstances": 17,
        "ID": "cd00fffc-db25be29-0c6da430-c56796a5-ba06933c",
        "Instances": [
            "556530b5-de7c487b-110b9d0e-12cfdbb9-f06b546e",
            "c46605db-836489fa-cb55fbbc-13c8a913-b0bad6ac",
            "9b63498d-cae4f25e-f52206b2-cbb4dc0e-dc55c788",
        ],
        "IsStable": True,
        "LastUpdate": "20200830T191109",
        "MainDicomTags": {
            "BodyPartExamined": "ABDOMEN",
            "Modality": "MR",
            "SeriesInstanceUID": "1.2.3.4.5.6789",
            "SeriesNumber": "1101",
        },
        "ParentStudy": "63bf5d42-b5382159-01971752-e0ceea3d-399bbca5",
        "Status": "Unknown",
        "Type": "Series",
    }


@pytest.fixture
def instance_json() -> dict[str, Any]:
    return {
        "FileSize": 139402,
        "FileUuid": "d8c5eff3-986c-4fe4-b06e-7e52b2a4238e",
        "ID": "29fa4d9d-51a69d1d-70e2b29a-fd824316-50850d0c",
        "IndexInSeries": 13,
        "MainDicomTags": {
            "InstanceNumber": "13",
            "SOPInstanceUID": "1.2.3.4.5.6789",
        },
        "ModifiedFrom": "22c54cb6-28302a69-3ff454a3-676b98f4-b84cd80a",
        "ParentSeries": "82081568-b6f8f4e6-ced76876-6504da25-ed0dfe03",
        "Type": "Instance",
    }


@pytest.fixture
def api_error_json() -> dict[str, Any]:
    return {
        "HttpError": "Internal Server Error",
        "HttpStatus": 500,
        "Message": "Unknown DICOM tag",
        "Method": "POST",
        "OrthancError": "Unknown DICOM tag",
        "OrthancStatus": 27,
        "Uri": "/tools/find",
    }
