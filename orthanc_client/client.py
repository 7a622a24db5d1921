"""
Orthanc API Client.

This module provides a synchronous Python client for the Orthanc REST API,
supporting both low-level HTTP calls and typed endpoint methods.
"""

from typing import Any

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from .exceptions import OrthancConnectionError, OrthancDecodeError, OrthancSinkError
from .models import (
    ENTITY_MODELS,
    Anonymization,
    AsyncResult,
    EntityBase,
    EntityKind,
    Instance,
    Job,
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
    Study,
    System,
    UploadResult,
)
from .settings import DEFAULT_TIMEOUT, Settings
from .types import JSONDict, JSONValue, Sink, TagQuery
from .utils.http import check_http_error, status_line
from .utils.logger import logger

_IDS: TypeAdapter[list[str]] = TypeAdapter(list[str])
_JSON: TypeAdapter[JSONDict] = TypeAdapter(dict[str, Any])
_MODALITIES: TypeAdapter[dict[str, Modality]] = TypeAdapter(dict[str, Modality])
_PEERS: TypeAdapter[dict[str, Peer]] = TypeAdapter(dict[str, Peer])
_ENTITY_LISTS: dict[EntityKind, TypeAdapter[Any]] = {
    kind: TypeAdapter(list[model]) for kind, model in ENTITY_MODELS.items()
}


def decode(body: bytes, target: type[BaseModel] | TypeAdapter[Any]) -> Any:
    """Decode a JSON response body into a model or adapter type.

    Args:
        body: Raw response body
        target: Model class or TypeAdapter describing the expected value

    Returns:
        Decoded value

    Raises:
        OrthancDecodeError: If the body is not valid JSON or does not match the schema
    """
    try:
        if isinstance(target, TypeAdapter):
            return target.validate_json(body)
        return target.model_validate_json(body)
    except ValidationError as e:
        logger.error(f"Cannot decode response body: {e}")
        raise OrthancDecodeError(str(e)) from e


def decode_text(body: bytes) -> str:
    """Decode a plain-text response body as strict UTF-8, stripping surrounding whitespace."""
    try:
        return body.decode("utf-8").strip()
    except UnicodeDecodeError as e:
        logger.error(f"Response body is not valid UTF-8: {e}")
        raise OrthancDecodeError(str(e)) from e


class Client:
    """Client for the Orthanc REST API.

    The client is configured once with the server address and optional Basic
    credentials and is not mutated afterwards. Every method performs a single
    HTTP exchange and either returns a typed value or raises OrthancError.

    Example:
        ```python
        client = Client("http://localhost:8042").with_auth("orthanc", "orthanc")

        # List patients
        patient_ids = client.patients()

        # Download a study archive
        with open("/tmp/study.zip", "wb") as f:
            client.study_dicom("9357491d-427a6c94-4080b6c8-1997f4aa-af658240", f)
        ```
    """

    def __init__(
        self,
        server: str,
        username: str | None = None,
        password: str | None = None,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
        log_requests: bool = False,
    ) -> None:
        """Initialize Orthanc client.

        Args:
            server: Address of the Orthanc server (e.g. "http://localhost:8042")
            username: Username for Basic authentication
            password: Password for Basic authentication. Authentication is only
                      sent when both username and password are given
            timeout: Client-wide timeout in seconds, applied to every call
            transport: Custom httpx transport (used by tests)
            log_requests: Enable request/response logging (default: False)
        """
        self.server = server.rstrip("/")
        self.username = username
        self.password = password
        self.timeout = timeout
        self.log_requests = log_requests
        self._transport = transport

        auth = None
        if username is not None and password is not None:
            auth = httpx.BasicAuth(username, password)

        self._client = httpx.Client(
            auth=auth, timeout=timeout, transport=transport, follow_redirects=True
        )

    @classmethod
    def from_settings(cls, settings: Settings, transport: httpx.BaseTransport | None = None) -> "Client":
        """Create a client from a Settings instance."""
        return cls(
            settings.server,
            settings.username,
            settings.password,
            timeout=settings.timeout,
            transport=transport,
            log_requests=settings.log_requests,
        )

    def with_auth(self, username: str, password: str) -> "Client":
        """Return a new client for the same server with Basic credentials attached."""
        return Client(
            self.server,
            username,
            password,
            timeout=self.timeout,
            transport=self._transport,
            log_requests=self.log_requests,
        )

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __repr__(self) -> str:
        return f"Client(server={self.server!r}, username={self.username!r})"

    # ==================== Transport ====================

    def _url(self, path: str) -> str:
        return f"{self.server}/{path}"

    def _log_request(self, method: str, url: str) -> None:
        """Log HTTP request if logging is enabled."""
        if self.log_requests:
            logger.debug(f"API Request: {method} {url}")

    def _log_response(self, response: httpx.Response) -> None:
        """Log HTTP response if logging is enabled."""
        if self.log_requests:
            logger.debug(f"API Response: {status_line(response)}")

    def _request(self, method: str, path: str, **kwargs: Any) -> bytes:
        """Perform a buffered HTTP request.

        Args:
            method: HTTP method (GET, POST, etc.)
            path: API path relative to the server address (e.g. "patients/foo")
            **kwargs: Additional arguments passed to httpx request

        Returns:
            Response body

        Raises:
            OrthancError: On HTTP error statuses
            OrthancConnectionError: If the exchange itself fails
        """
        url = self._url(path)
        self._log_request(method, url)

        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"HTTP error during request: {e}")
            raise OrthancConnectionError(str(e)) from e

        self._log_response(response)
        return check_http_error(response)

    def _request_stream(self, method: str, path: str, sink: Sink, **kwargs: Any) -> None:
        """Perform an HTTP request and copy the response body into ``sink``.

        The body is written chunk by chunk as it arrives. A failure in the middle
        of the copy leaves the sink partially written.

        Raises:
            OrthancError: On HTTP error statuses
            OrthancConnectionError: If the exchange itself fails
            OrthancSinkError: If ``sink.write`` fails
        """
        url = self._url(path)
        self._log_request(method, url)

        try:
            with self._client.stream(method, url, **kwargs) as response:
                self._log_response(response)
                if response.status_code >= 400:
                    response.read()
                    check_http_error(response)
                for chunk in response.iter_bytes():
                    try:
                        sink.write(chunk)
                    except Exception as e:
                        logger.error(f"Cannot write response body of {method} {url}: {e}")
                        raise OrthancSinkError(str(e)) from e
        except httpx.HTTPError as e:
            logger.error(f"HTTP error during streamed request: {e}")
            raise OrthancConnectionError(str(e)) from e

    def get(self, path: str) -> bytes:
        """GET ``path`` and return the response body."""
        return self._request("GET", path)

    def get_stream(self, path: str, sink: Sink) -> None:
        """GET ``path`` and stream the response body into ``sink``."""
        self._request_stream("GET", path, sink)

    def post(self, path: str, data: JSONValue) -> bytes:
        """POST ``data`` as JSON and return the response body."""
        return self._request("POST", path, json=data)

    def post_receive_stream(self, path: str, data: JSONValue, sink: Sink) -> None:
        """POST ``data`` as JSON and stream the response body into ``sink``."""
        self._request_stream("POST", path, sink, json=data)

    def post_bytes(self, path: str, data: bytes) -> bytes:
        """POST raw bytes and return the response body."""
        return self._request("POST", path, content=data)

    def put(self, path: str, data: JSONValue) -> bytes:
        """PUT ``data`` as JSON and return the response body."""
        return self._request("PUT", path, json=data)

    def delete(self, path: str) -> bytes:
        """DELETE ``path`` and return the response body."""
        return self._request("DELETE", path)

    # ==================== System ====================

    def system(self) -> System:
        """System information."""
        return decode(self.get("system"), System)

    # ==================== Listing ====================

    def _list(self, group: str) -> list[str]:
        return decode(self.get(group), _IDS)

    def _list_expanded(self, kind: EntityKind) -> list[Any]:
        return decode(self.get(f"{kind.path_segment}?expand"), _ENTITY_LISTS[kind])

    def modalities(self) -> list[str]:
        """List modality names."""
        return self._list("modalities")

    def peers(self) -> list[str]:
        """List peer names."""
        return self._list("peers")

    def patients(self) -> list[str]:
        """List patient IDs."""
        return self._list("patients")

    def studies(self) -> list[str]:
        """List study IDs."""
        return self._list("studies")

    def series_list(self) -> list[str]:
        """List series IDs."""
        return self._list("series")

    def instances(self) -> list[str]:
        """List instance IDs."""
        return self._list("instances")

    def jobs(self) -> list[str]:
        """List job IDs."""
        return self._list("jobs")

    def modalities_expanded(self) -> dict[str, Modality]:
        """All modalities, keyed by name."""
        return decode(self.get("modalities?expand"), _MODALITIES)

    def peers_expanded(self) -> dict[str, Peer]:
        """All peers, keyed by name."""
        return decode(self.get("peers?expand"), _PEERS)

    def patients_expanded(self) -> list[Patient]:
        return self._list_expanded(EntityKind.PATIENT)

    def studies_expanded(self) -> list[Study]:
        return self._list_expanded(EntityKind.STUDY)

    def series_expanded(self) -> list[Series]:
        return self._list_expanded(EntityKind.SERIES)

    def instances_expanded(self) -> list[Instance]:
        return self._list_expanded(EntityKind.INSTANCE)

    # ==================== Single entities ====================

    def patient(self, id: str) -> Patient:
        """Get a patient by its ID."""
        return decode(self.get(f"patients/{id}"), Patient)

    def study(self, id: str) -> Study:
        """Get a study by its ID."""
        return decode(self.get(f"studies/{id}"), Study)

    def series(self, id: str) -> Series:
        """Get a series by its ID."""
        return decode(self.get(f"series/{id}"), Series)

    def instance(self, id: str) -> Instance:
        """Get an instance by its ID."""
        return decode(self.get(f"instances/{id}"), Instance)

    def job(self, id: str) -> Job:
        """Get a job by its ID."""
        return decode(self.get(f"jobs/{id}"), Job)

    # ==================== Tags ====================

    def instance_tags(self, id: str) -> JSONDict:
        """All DICOM tags of an instance, in the simplified ``{"Name": value}`` form."""
        return decode(self.get(f"instances/{id}/simplified-tags"), _JSON)

    def instance_tags_expanded(self, id: str) -> JSONDict:
        """All DICOM tags of an instance, keyed by tag coding with name, type and value."""
        return decode(self.get(f"instances/{id}/tags"), _JSON)

    def instance_content(self, id: str) -> list[str]:
        """Tag codings present in an instance, e.g. ``["0008-0018", "0040-0260"]``."""
        return decode(self.get(f"instances/{id}/content"), _IDS)

    def instance_tag(self, id: str, tag: str) -> str:
        """Get the value of a single DICOM tag of an instance.

        Args:
            id: Instance ID
            tag: DICOM tag coding, e.g. ``0008-0018``

        Returns:
            Tag value with surrounding whitespace removed

        Raises:
            OrthancDecodeError: If the value is not valid UTF-8
        """
        return decode_text(self.get(f"instances/{id}/content/{tag}"))

    # ==================== Downloads ====================

    def patient_dicom(self, id: str, sink: Sink) -> None:
        """Stream a patient's ZIP archive into ``sink``."""
        self.get_stream(f"patients/{id}/archive", sink)

    def study_dicom(self, id: str, sink: Sink) -> None:
        """Stream a study's ZIP archive into ``sink``."""
        self.get_stream(f"studies/{id}/archive", sink)

    def series_dicom(self, id: str, sink: Sink) -> None:
        """Stream a series' ZIP archive into ``sink``."""
        self.get_stream(f"series/{id}/archive", sink)

    def instance_dicom(self, id: str, sink: Sink) -> None:
        """Stream an instance's DICOM file into ``sink``."""
        self.get_stream(f"instances/{id}/file", sink)

    # ==================== Deletion ====================

    def _delete_entity(self, kind: EntityKind, id: str) -> RemainingAncestor:
        resp = decode(self.delete(f"{kind.path_segment}/{id}"), RemainingAncestor)
        logger.info(f"Deleted {kind.value.lower()} {id}")
        return resp

    def delete_patient(self, id: str) -> RemainingAncestor:
        return self._delete_entity(EntityKind.PATIENT, id)

    def delete_study(self, id: str) -> RemainingAncestor:
        return self._delete_entity(EntityKind.STUDY, id)

    def delete_series(self, id: str) -> RemainingAncestor:
        return self._delete_entity(EntityKind.SERIES, id)

    def delete_instance(self, id: str) -> RemainingAncestor:
        return self._delete_entity(EntityKind.INSTANCE, id)

    # ==================== Modalities and peers ====================

    def modality_echo(self, modality: str, timeout: int | None = None) -> None:
        """Send a C-ECHO request to a remote modality.

        Returning without an exception means the modality answered.

        Args:
            modality: Modality name
            timeout: Timeout of the DICOM association, in seconds
        """
        data: JSONDict = {}
        if timeout is not None:
            data["Timeout"] = timeout
        self.post(f"modalities/{modality}/echo", data)

    def modality_store(self, modality: str, ids: list[str]) -> ModalityStoreResult:
        """Send a C-STORE request to a remote modality.

        Args:
            modality: Modality name
            ids: IDs of the entities to send (patients, studies, series or instances)

        Returns:
            Store statistics
        """
        resp = self.post(f"modalities/{modality}/store", list(ids))
        return decode(resp, ModalityStoreResult)

    def modality_find(
        self,
        modality: str,
        level: EntityKind,
        query: TagQuery,
        normalize: bool | None = None,
    ) -> ModalityFindResult:
        """Send a C-FIND request to a remote modality.

        Args:
            modality: Modality name
            level: Query level
            query: DICOM tags to match
            normalize: Whether Orthanc should normalize the query

        Returns:
            Handle of the query created on the server
        """
        find = ModalityFind(level=level, query=query, normalize=normalize)
        resp = self.post(f"modalities/{modality}/query", find.to_wire())
        return decode(resp, ModalityFindResult)

    def modality_move(self, modality: str, move: ModalityMove) -> None:
        """Send a C-MOVE request to a remote modality."""
        self.post(f"modalities/{modality}/move", move.to_wire())

    def peer_store(self, peer: str, ids: list[str]) -> PeerStoreResult:
        """Send entities to an Orthanc peer.

        Args:
            peer: Peer name
            ids: IDs of the entities to send

        Returns:
            Store statistics
        """
        resp = self.post(f"peers/{peer}/store", list(ids))
        return decode(resp, PeerStoreResult)

    def create_modality(self, name: str, modality: Modality) -> None:
        """Create a modality."""
        self.put(f"modalities/{name}", modality.to_wire())
        logger.info(f"Created modality {name}")

    def modify_modality(self, name: str, modality: Modality) -> None:
        """Modify a modality."""
        self.put(f"modalities/{name}", modality.to_wire())
        logger.info(f"Modified modality {name}")

    def delete_modality(self, name: str) -> None:
        """Delete a modality."""
        self.delete(f"modalities/{name}")
        logger.info(f"Deleted modality {name}")

    def create_peer(self, name: str, peer: Peer) -> None:
        """Create a peer."""
        self.put(f"peers/{name}", peer.to_wire())
        logger.info(f"Created peer {name}")

    def modify_peer(self, name: str, peer: Peer) -> None:
        """Modify a peer."""
        self.put(f"peers/{name}", peer.to_wire())
        logger.info(f"Modified peer {name}")

    def delete_peer(self, name: str) -> None:
        """Delete a peer."""
        self.delete(f"peers/{name}")
        logger.info(f"Deleted peer {name}")

    # ==================== Queries ====================

    def queries(self) -> list[str]:
        """List the IDs of the C-FIND queries kept by the server."""
        return self._list("queries")

    def query_level(self, id: str) -> EntityKind:
        """Level a query was issued at."""
        level = decode_text(self.get(f"queries/{id}/level"))
        try:
            return EntityKind(level)
        except ValueError as e:
            logger.error(f"Unknown level of query {id}: {level!r}")
            raise OrthancDecodeError(str(e)) from e

    def query_modality(self, id: str) -> str:
        """Name of the modality a query was sent to."""
        return decode_text(self.get(f"queries/{id}/modality"))

    def query_query(self, id: str) -> JSONDict:
        """DICOM tags the query was issued with."""
        return decode(self.get(f"queries/{id}/query"), _JSON)

    def query_answers(self, id: str) -> list[str]:
        """Indices of the answers to a query, e.g. ``["0", "1"]``."""
        return decode(self.get(f"queries/{id}/answers"), _IDS)

    def query_answer(self, id: str, index: str) -> JSONDict:
        """DICOM tags of a single query answer."""
        return decode(self.get(f"queries/{id}/answers/{index}/content"), _JSON)

    def _retrieve(self, path: str, retrieve: ModalityRetrieve) -> AsyncResult | None:
        resp = self.post(path, retrieve.to_wire())
        if not retrieve.asynchronous:
            return None
        return decode(resp, AsyncResult)

    def query_retrieve(self, id: str, retrieve: ModalityRetrieve) -> AsyncResult | None:
        """Send a C-MOVE for every answer of a query.

        Args:
            id: Query ID, as returned by ``modality_find``
            retrieve: Target AET and execution mode

        Returns:
            Job handle when ``retrieve.asynchronous`` is set, otherwise None once
            the transfer has completed
        """
        return self._retrieve(f"queries/{id}/retrieve", retrieve)

    def query_answer_retrieve(
        self, id: str, index: str, retrieve: ModalityRetrieve
    ) -> AsyncResult | None:
        """Send a C-MOVE for a single answer of a query."""
        return self._retrieve(f"queries/{id}/answers/{index}/retrieve", retrieve)

    # ==================== Anonymization and modification ====================

    def _anonymize(
        self, kind: EntityKind, id: str, anonymization: Anonymization | None
    ) -> ModificationResult:
        data = (anonymization or Anonymization()).to_wire()
        resp = self.post(f"{kind.path_segment}/{id}/anonymize", data)
        return decode(resp, ModificationResult)

    def _modify(self, kind: EntityKind, id: str, modification: Modification) -> ModificationResult:
        resp = self.post(f"{kind.path_segment}/{id}/modify", modification.to_wire())
        return decode(resp, ModificationResult)

    def anonymize_patient(
        self, id: str, anonymization: Anonymization | None = None
    ) -> ModificationResult:
        """Anonymize a patient. The server creates an anonymized copy."""
        return self._anonymize(EntityKind.PATIENT, id, anonymization)

    def anonymize_study(
        self, id: str, anonymization: Anonymization | None = None
    ) -> ModificationResult:
        """Anonymize a study. The server creates an anonymized copy."""
        return self._anonymize(EntityKind.STUDY, id, anonymization)

    def anonymize_series(
        self, id: str, anonymization: Anonymization | None = None
    ) -> ModificationResult:
        """Anonymize a series. The server creates an anonymized copy."""
        return self._anonymize(EntityKind.SERIES, id, anonymization)

    def anonymize_instance(
        self, id: str, sink: Sink, anonymization: Anonymization | None = None
    ) -> None:
        """Anonymize an instance and stream the resulting DICOM file into ``sink``.

        Example:
            ```python
            with open("/tmp/anonymized_instance.dcm", "wb") as f:
                client.anonymize_instance("3693b9d5-8b0e2a80-2cf45dda-d19e7c22-8749103c", f)
            ```
        """
        data = (anonymization or Anonymization()).to_wire()
        self.post_receive_stream(f"instances/{id}/anonymize", data, sink)

    def modify_patient(self, id: str, modification: Modification) -> ModificationResult:
        """Modify a patient. The server creates a modified copy."""
        return self._modify(EntityKind.PATIENT, id, modification)

    def modify_study(self, id: str, modification: Modification) -> ModificationResult:
        """Modify a study. The server creates a modified copy."""
        return self._modify(EntityKind.STUDY, id, modification)

    def modify_series(self, id: str, modification: Modification) -> ModificationResult:
        """Modify a series. The server creates a modified copy."""
        return self._modify(EntityKind.SERIES, id, modification)

    def modify_instance(self, id: str, modification: Modification, sink: Sink) -> None:
        """Modify an instance and stream the resulting DICOM file into ``sink``.

        Example:
            ```python
            with open("/tmp/modified_instance.dcm", "wb") as f:
                client.modify_instance(
                    "3693b9d5-8b0e2a80-2cf45dda-d19e7c22-8749103c",
                    Modification(remove=["PatientName"]),
                    f,
                )
            ```
        """
        self.post_receive_stream(f"instances/{id}/modify", modification.to_wire(), sink)

    # ==================== Upload ====================

    def upload(self, data: bytes) -> UploadResult:
        """Upload a DICOM file.

        Args:
            data: Raw content of the DICOM file

        Returns:
            Upload status and the IDs of the instance and its ancestors
        """
        resp = decode(self.post_bytes("instances", data), UploadResult)
        logger.info(f"Uploaded instance {resp.id}: {resp.status}")
        return resp

    # ==================== Search ====================

    def search(self, level: EntityKind, query: TagQuery) -> list[EntityBase]:
        """Search for entities of one level by DICOM tag values.

        Args:
            level: Entity level to search at
            query: DICOM tags to match, e.g. ``{"StudyID": "1742"}``

        Returns:
            Matching entities of the requested level, in expanded form
        """
        search = Search(level=level, query=query, expand=True)
        resp = self.post("tools/find", search.to_wire())
        return decode(resp, _ENTITY_LISTS[level])
