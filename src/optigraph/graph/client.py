"""Authenticated HTTP client for the content graph gateway."""

from __future__ import annotations

import json
from typing import Any, Mapping, Sequence

import httpx

from optigraph.config import GraphConfig
from optigraph.exceptions import GraphRequestError
from optigraph.graph.normalize import normalize_items
from optigraph.graph.signing import compute_auth_header
from optigraph.metrics.observability import GraphMetrics, TimedSection, get_logger
from optigraph.models import SearchResult, SynonymUploadResult

SYNONYMS_ENDPOINT = "/resources/synonyms"
GRAPHQL_ENDPOINT = "/content/v2"
PINNED_COLLECTIONS_ENDPOINT = "/api/pinned/collections"

SYNONYM_SLOTS = ("1", "2")
DEFAULT_LANGUAGE_ROUTING = "standard"
DEFAULT_CONTENT_TYPE = "text/plain"
JSON_CONTENT_TYPE = "application/json"


def _describe_failure(response: httpx.Response) -> str:
    return f"{response.status_code} {response.reason_phrase} - {response.text}"


def _describe_transport_error(exc: Exception) -> str:
    return str(exc) or exc.__class__.__name__


def _as_list(payload: Any) -> list[Any]:
    return payload if isinstance(payload, list) else [payload]


class GraphClient:
    """Signs and sends requests to the content graph gateway.

    Each call opens its own ``httpx.AsyncClient``; connection pooling and
    retries are left to the transport. Pass ``transport`` to route calls to a
    mock server.
    """

    def __init__(
        self,
        config: GraphConfig,
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._timeout = timeout
        self._transport = transport
        self._logger = get_logger("graph")

    @property
    def config(self) -> GraphConfig:
        return self._config

    def build_url(self, endpoint_path: str, query_params: Mapping[str, str] | None = None) -> httpx.URL:
        url = httpx.URL(self._config.gateway_base_url).join(endpoint_path)
        if query_params:
            url = url.copy_merge_params({key: str(value) for key, value in query_params.items()})
        return url

    async def request(
        self,
        endpoint_path: str,
        *,
        method: str = "GET",
        body: str | bytes = "",
        headers: Mapping[str, str] | None = None,
        query_params: Mapping[str, str] | None = None,
    ) -> httpx.Response:
        """Send one signed request and return the raw response.

        The signature covers the exact path and query string that go on the
        wire. Status codes are not interpreted here.
        """

        method = method.upper()
        url = self.build_url(endpoint_path, query_params)
        path_with_query = url.raw_path.decode("ascii")
        content = b"" if method == "GET" else (body if isinstance(body, bytes) else body.encode("utf-8"))
        request_headers = httpx.Headers({"Content-Type": DEFAULT_CONTENT_TYPE})
        request_headers.update(headers or {})
        request_headers["Authorization"] = compute_auth_header(self._config, method, path_with_query, content)

        timer = TimedSection()
        try:
            with timer:
                async with httpx.AsyncClient(transport=self._transport, timeout=self._timeout) as client:
                    response = await client.request(
                        method,
                        url,
                        content=None if method == "GET" else content,
                        headers=request_headers,
                    )
        except httpx.HTTPError as exc:
            GraphMetrics.observe_transport_error(method)
            self._logger.warning("graph.transport_error", method=method, path=url.path, detail=str(exc))
            raise
        GraphMetrics.observe_response(method, response.status_code, timer.duration)
        self._logger.info(
            "graph.request",
            method=method,
            path=url.path,
            status_code=response.status_code,
            duration_seconds=timer.duration,
        )
        return response

    async def hmac_api_request(
        self,
        endpoint_path: str,
        *,
        method: str = "GET",
        body: Any = None,
        headers: Mapping[str, str] | None = None,
        query_params: Mapping[str, str] | None = None,
    ) -> httpx.Response:
        """Send a REST call, JSON-encoding non-string bodies."""

        if body is None:
            payload = ""
        elif isinstance(body, (str, bytes)):
            payload = body
        else:
            payload = json.dumps(body)
        content_type = DEFAULT_CONTENT_TYPE if "/synonyms" in endpoint_path else JSON_CONTENT_TYPE
        return await self.request(
            endpoint_path,
            method=method,
            body=payload,
            headers={"Content-Type": content_type, **(headers or {})},
            query_params=query_params,
        )

    async def upload_synonyms(
        self,
        synonyms: str,
        *,
        slot: str | int = "1",
        language_routing: str = DEFAULT_LANGUAGE_ROUTING,
    ) -> SynonymUploadResult:
        """Replace the synonyms in ``slot``. An empty string clears the slot."""

        slot = str(slot)
        if slot not in SYNONYM_SLOTS:
            raise ValueError(f"Synonym slot must be one of {', '.join(SYNONYM_SLOTS)}, got {slot!r}")
        try:
            response = await self.request(
                SYNONYMS_ENDPOINT,
                method="PUT",
                body=synonyms,
                query_params={"synonym_slot": slot, "language_routing": language_routing},
            )
        except httpx.HTTPError as exc:
            return SynonymUploadResult(success=False, message="Network error", error=_describe_transport_error(exc))
        if response.is_success:
            return SynonymUploadResult(
                success=True,
                message=f"Synonyms successfully uploaded to slot {slot} for language routing: {language_routing}",
            )
        self._logger.warning("synonyms.rejected", status_code=response.status_code, slot=slot)
        return SynonymUploadResult(
            success=False,
            message="Failed to upload synonyms",
            error=_describe_failure(response),
        )

    async def graphql_request(self, query: str, variables: Mapping[str, Any] | None = None) -> httpx.Response:
        payload = json.dumps({"query": query, "variables": dict(variables or {})})
        return await self.request(
            GRAPHQL_ENDPOINT,
            method="POST",
            body=payload,
            headers={"Content-Type": JSON_CONTENT_TYPE},
        )

    async def search_content(self, query: str, variables: Mapping[str, Any] | None = None) -> SearchResult:
        """Run a GraphQL search and normalize the hits. Never raises for backend failures."""

        try:
            response = await self.graphql_request(query, variables)
        except httpx.HTTPError as exc:
            return SearchResult(items=[], error=_describe_transport_error(exc))
        if not response.is_success:
            return SearchResult(items=[], error=f"GraphQL query failed: {_describe_failure(response)}")
        try:
            payload = response.json()
        except ValueError as exc:
            return SearchResult(items=[], error=f"GraphQL response was not valid JSON: {exc}")
        if not isinstance(payload, dict):
            return SearchResult(items=[], error="GraphQL response had an unexpected shape")
        errors = payload.get("errors")
        if errors:
            messages = [
                str(error.get("message", error)) if isinstance(error, dict) else str(error)
                for error in _as_list(errors)
            ]
            return SearchResult(items=[], error=f"GraphQL errors: {', '.join(messages)}")
        try:
            items = normalize_items(payload)
        except (AttributeError, TypeError, ValueError) as exc:
            self._logger.warning("graph.normalize_failed", detail=str(exc))
            return SearchResult(items=[], error=f"GraphQL response could not be normalized: {exc}")
        GraphMetrics.observe_search(len(items))
        return SearchResult(items=items)

    async def _call(self, action: str, endpoint_path: str, *, method: str, body: Any = None) -> httpx.Response:
        response = await self.hmac_api_request(endpoint_path, method=method, body=body)
        if not response.is_success:
            raise GraphRequestError(action, response.status_code, response.reason_phrase, response.text)
        return response

    async def list_pinned_collections(self) -> list[Any]:
        response = await self._call("fetch collections", PINNED_COLLECTIONS_ENDPOINT, method="GET")
        return _as_list(response.json())

    async def create_pinned_collection(self, title: str, *, is_active: bool = True) -> Any:
        response = await self._call(
            "create collection",
            PINNED_COLLECTIONS_ENDPOINT,
            method="POST",
            body={"title": title, "isActive": is_active},
        )
        return response.json()

    async def update_pinned_collection(
        self,
        collection_id: str,
        *,
        title: str | None = None,
        is_active: bool | None = None,
    ) -> Any:
        response = await self._call(
            "update collection",
            f"{PINNED_COLLECTIONS_ENDPOINT}/{collection_id}",
            method="PUT",
            body={key: value for key, value in (("title", title), ("isActive", is_active)) if value is not None},
        )
        return response.json()

    async def delete_pinned_collection(self, collection_id: str) -> None:
        await self._call("delete collection", f"{PINNED_COLLECTIONS_ENDPOINT}/{collection_id}", method="DELETE")

    async def list_pinned_items(self, collection_id: str) -> list[Any]:
        response = await self._call(
            "fetch pinned items",
            f"{PINNED_COLLECTIONS_ENDPOINT}/{collection_id}/items",
            method="GET",
        )
        return _as_list(response.json())

    async def add_pinned_item(
        self,
        collection_id: str,
        *,
        phrases: str | Sequence[str],
        target_key: str,
        language: str = "en",
        priority: int = 1,
        is_active: bool = True,
    ) -> dict[str, Any]:
        """Pin ``target_key`` for ``phrases``; returns the submitted item merged with the backend reply."""

        body: dict[str, Any] = {
            "phrases": phrases if isinstance(phrases, str) else "\n".join(phrases),
            "targetKey": target_key,
            "language": language,
            "priority": priority,
            "isActive": is_active,
        }
        response = await self._call(
            "add pinned item",
            f"{PINNED_COLLECTIONS_ENDPOINT}/{collection_id}/items",
            method="POST",
            body=body,
        )
        try:
            result = response.json()
        except ValueError:
            result = {"success": True}
        if isinstance(result, dict):
            return {**body, **result}
        return body

    async def delete_pinned_item(self, collection_id: str, item_id: str) -> None:
        await self._call(
            "delete pinned item",
            f"{PINNED_COLLECTIONS_ENDPOINT}/{collection_id}/items/{item_id}",
            method="DELETE",
        )
