"""Typesense client façade — typed, uniform access to a Typesense server.

Usage::

    config = ConnectionConfig(host="localhost", api_key="xyz")
    with TypesenseClient(config) as client:
        client.create_collection({"name": "books", "fields": [{"name": "title", "type": "string"}]})
        client.create_document("books", {"id": "1", "title": "Dune"})

Every failure raised by the server or by ``httpx`` surfaces as
:class:`~typebridge.exceptions.TypesenseError`. Retrieval and delete
operations scoped to a collection return an empty dict when the collection
does not exist instead of raising.
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from typebridge.client.coercion import prepare_item_value
from typebridge.config.settings import ConnectionConfig
from typebridge.exceptions import TypesenseError
from typebridge.models.collection import Collection, CollectionLookup, Document, LookupStatus, Synonym

logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-TYPESENSE-API-KEY"


def _segment(value: str | int) -> str:
    return quote(str(value), safe="")


def _error_message(response: httpx.Response) -> str:
    """Extract the server's error message from a failed response."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.text or response.reason_phrase or f"HTTP {response.status_code}"


class Keys:
    """Handle for the ``/keys`` endpoints of one server.

    Obtained from :meth:`TypesenseClient.get_keys`.
    """

    def __init__(self, client: TypesenseClient) -> None:
        self._client = client

    def retrieve(self) -> dict[str, Any]:
        """List all keys. Returns the raw ``{"keys": [...]}`` response."""
        return self._client._request("GET", "/keys")

    def retrieve_key(self, key_id: int) -> dict[str, Any]:
        """Fetch a single key's metadata (the secret is never included)."""
        return self._client._request("GET", f"/keys/{_segment(key_id)}")

    def create(self, schema: dict[str, Any]) -> dict[str, Any]:
        """Create a key.

        The response carries the full secret under ``value``. It is the only
        time the server ever returns it.
        """
        response = self._client._request("POST", "/keys", json=schema)
        logger.info("Created API key %s (%s)", response.get("id"), schema.get("description", ""))
        return response

    def delete(self, key_id: int) -> dict[str, Any]:
        response = self._client._request("DELETE", f"/keys/{_segment(key_id)}")
        logger.info("Deleted API key %s", key_id)
        return response


class TypesenseClient:
    """Synchronous façade over the Typesense REST API.

    Construction performs a health check, so a constructed client means the
    server was reachable at that moment; later calls may still fail.

    The instance holds only its configuration and an ``httpx.Client`` and
    keeps no other state between calls. It can be shared across threads
    because ``httpx.Client`` is safe for concurrent use; a custom
    ``transport`` must be too.

    Args:
        config: Connection parameters.
        transport: Optional ``httpx`` transport (e.g. ``httpx.MockTransport``).

    Raises:
        TypesenseError: If the server cannot be reached or reports unhealthy.
    """

    def __init__(
        self,
        config: ConnectionConfig,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.config = config
        try:
            self._http = httpx.Client(
                base_url=config.base_url,
                timeout=httpx.Timeout(config.connection_timeout_seconds),
                headers={
                    API_KEY_HEADER: config.api_key,
                    "Content-Type": "application/json",
                },
                transport=transport,
            )
        except (httpx.HTTPError, httpx.InvalidURL, ValueError, TypeError) as e:
            raise TypesenseError(f"Invalid Typesense connection settings: {e}") from e

        try:
            health = self.retrieve_health()
            if not isinstance(health, dict) or health.get("ok") is not True:
                raise TypesenseError(f"Typesense server is not healthy: {health!r}")
        except TypesenseError:
            self._http.close()
            raise

        logger.info("Connected to Typesense at %s", config.base_url)

    def __enter__(self) -> TypesenseClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._http.close()

    # ── Transport ────────────────────────────────────────────────────────

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        """Issue one request and return the decoded JSON body."""
        logger.debug("%s %s", method, path)
        try:
            resp = self._http.request(method, path, params=params, json=json)
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPStatusError as e:
            raise TypesenseError(_error_message(e.response), e.response.status_code) from e
        except httpx.HTTPError as e:
            raise TypesenseError(f"Typesense request failed: {e}") from e
        except ValueError as e:
            raise TypesenseError(f"Malformed response from Typesense: {e}") from e

    # ── Collections ──────────────────────────────────────────────────────

    def lookup_collection(self, collection_name: str) -> CollectionLookup:
        """Look up a collection, telling "missing" apart from "lookup failed"."""
        if not collection_name:
            return CollectionLookup(status=LookupStatus.NOT_FOUND)
        try:
            data = self._request("GET", f"/collections/{_segment(collection_name)}")
        except TypesenseError as e:
            if e.code == 404:
                return CollectionLookup(status=LookupStatus.NOT_FOUND)
            return CollectionLookup(status=LookupStatus.FAILED, error=e)
        try:
            collection = Collection.model_validate(data)
        except ValidationError as e:
            error = TypesenseError(f"Malformed collection schema from Typesense: {e}")
            error.__cause__ = e
            return CollectionLookup(status=LookupStatus.FAILED, error=error)
        return CollectionLookup(status=LookupStatus.FOUND, collection=collection)

    def retrieve_collection(self, collection_name: str) -> Collection | None:
        """Return the collection, or ``None`` if it cannot be retrieved.

        ``None`` is returned for any failure, including auth and transport
        errors. Use :meth:`lookup_collection` to distinguish those.
        """
        lookup = self.lookup_collection(collection_name)
        if lookup.status is LookupStatus.FAILED:
            logger.warning("Lookup of collection '%s' failed: %s", collection_name, lookup.error)
        return lookup.collection

    def create_collection(self, schema: dict[str, Any]) -> Collection:
        """Create a collection from ``schema`` and return it as stored by the server."""
        self._request("POST", "/collections", json=schema)
        name = schema.get("name", "")
        logger.info("Created collection '%s'", name)

        collection = self.retrieve_collection(name)
        if collection is None:
            raise TypesenseError(f"Collection '{name}' was not found after creation.")
        return collection

    def drop_collection(self, collection_name: str) -> None:
        self._request("DELETE", f"/collections/{_segment(collection_name)}")
        logger.info("Dropped collection '%s'", collection_name)

    def retrieve_collections(self) -> list[Collection]:
        data = self._request("GET", "/collections")
        try:
            return [Collection.model_validate(c) for c in data or []]
        except (ValidationError, TypeError) as e:
            raise TypesenseError(f"Malformed collection list from Typesense: {e}") from e

    # ── Documents ────────────────────────────────────────────────────────

    def create_document(self, collection_name: str, document: Document) -> None:
        """Upsert ``document`` into an existing collection.

        Raises:
            TypesenseError: If the collection does not exist or the upsert fails.
        """
        if self.retrieve_collection(collection_name) is None:
            raise TypesenseError(f"Error creating document: collection '{collection_name}' does not exist.")

        self._request(
            "POST",
            f"/collections/{_segment(collection_name)}/documents",
            params={"action": "upsert"},
            json=document,
        )

    def retrieve_document(self, collection_name: str, document_id: str) -> Document:
        if self.retrieve_collection(collection_name) is None:
            return {}
        return self._request(
            "GET",
            f"/collections/{_segment(collection_name)}/documents/{_segment(document_id)}",
        )

    def delete_document(self, collection_name: str, document_id: str) -> Document:
        """Delete a document and return it as it was before deletion."""
        if self.retrieve_collection(collection_name) is None:
            return {}
        return self._request(
            "DELETE",
            f"/collections/{_segment(collection_name)}/documents/{_segment(document_id)}",
        )

    def delete_documents(self, collection_name: str, filter_condition: dict[str, Any]) -> dict[str, Any]:
        """Delete every document matching ``filter_condition``.

        Args:
            collection_name: Target collection.
            filter_condition: Query parameters, e.g. ``{"filter_by": "year:<2000"}``.
                An empty filter deletes nothing.

        Returns:
            The server response (``{"num_deleted": n}``), or ``{}`` when nothing
            was sent.
        """
        if not filter_condition or self.retrieve_collection(collection_name) is None:
            return {}
        return self._request(
            "DELETE",
            f"/collections/{_segment(collection_name)}/documents",
            params=filter_condition,
        )

    def search_documents(self, collection_name: str, parameters: dict[str, Any]) -> dict[str, Any]:
        """Run a search (``q``, ``query_by``, ...) against a collection."""
        if not parameters or self.retrieve_collection(collection_name) is None:
            return {}
        return self._request(
            "GET",
            f"/collections/{_segment(collection_name)}/documents/search",
            params=parameters,
        )

    # ── Synonyms ─────────────────────────────────────────────────────────

    def create_synonym(self, collection_name: str, synonym_id: str, synonym: Synonym) -> Synonym:
        """Create or replace the synonym set ``synonym_id``."""
        if self.retrieve_collection(collection_name) is None:
            return {}
        return self._request(
            "PUT",
            f"/collections/{_segment(collection_name)}/synonyms/{_segment(synonym_id)}",
            json=synonym,
        )

    def retrieve_synonym(self, collection_name: str, synonym_id: str) -> Synonym:
        if self.retrieve_collection(collection_name) is None:
            return {}
        return self._request(
            "GET",
            f"/collections/{_segment(collection_name)}/synonyms/{_segment(synonym_id)}",
        )

    def retrieve_synonyms(self, collection_name: str) -> dict[str, Any]:
        if self.retrieve_collection(collection_name) is None:
            return {}
        return self._request("GET", f"/collections/{_segment(collection_name)}/synonyms")

    def delete_synonym(self, collection_name: str, synonym_id: str) -> Synonym:
        if self.retrieve_collection(collection_name) is None:
            return {}
        return self._request(
            "DELETE",
            f"/collections/{_segment(collection_name)}/synonyms/{_segment(synonym_id)}",
        )

    # ── Monitoring ───────────────────────────────────────────────────────

    def retrieve_health(self) -> dict[str, Any]:
        return self._request("GET", "/health")

    def retrieve_debug(self) -> dict[str, Any]:
        return self._request("GET", "/debug")

    def retrieve_metrics(self) -> dict[str, Any]:
        return self._request("GET", "/metrics.json")

    # ── Keys ─────────────────────────────────────────────────────────────

    def get_keys(self) -> Keys:
        return Keys(self)

    # ── Values ───────────────────────────────────────────────────────────

    @staticmethod
    def prepare_item_value(value: Any, type_tag: str) -> Any:
        """Coerce ``value`` to the declared field type. See :func:`prepare_item_value`."""
        return prepare_item_value(value, type_tag)
