"""FastAPI admin application exposing synonyms, content search and pinned results."""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from typing import Any
from uuid import uuid4

import httpx
from fastapi import Depends, FastAPI, HTTPException, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from optigraph.api.schemas import (
    ApiResponse,
    CollectionCreateRequest,
    CollectionDeleteRequest,
    CollectionUpdateRequest,
    ContentSearchRequest,
    LocaleEntry,
    LocalesResponse,
    PinnedItemCreateRequest,
    PinnedItemDeleteRequest,
    SynonymErrorResponse,
    SynonymUploadRequest,
    SynonymUploadResponse,
)
from optigraph.config import GraphConfig, Settings, get_settings
from optigraph.exceptions import GraphRequestError
from optigraph.graph import CONTENT_SEARCH_QUERY, GraphClient, recent_content_query
from optigraph.graph.queries import is_valid_content_type
from optigraph.i18n import I18nConfig, is_valid_language_code, load_i18n_config, to_backend_locale
from optigraph.metrics.observability import (
    bind_correlation_id,
    clear_correlation_id,
    configure_logging,
    get_correlation_id,
    get_logger,
)
from optigraph.validation import clamp_number, is_valid_guid, parse_csv_phrases, sanitize_input

API_PREFIX = "/opti-admin/api"
MIN_SEARCH_LIMIT = 1
MAX_SEARCH_LIMIT = 50


@dataclass(frozen=True)
class AppDependencies:
    graph_client: GraphClient
    i18n: I18nConfig


def _build_dependencies(settings: Settings) -> AppDependencies:
    graph_client = GraphClient(GraphConfig.from_settings(settings), timeout=settings.graph_timeout_seconds)
    return AppDependencies(graph_client=graph_client, i18n=load_i18n_config(settings.i18n_config_json))


def _success(data: Any = None, message: str | None = None) -> JSONResponse:
    payload = ApiResponse(success=True, message=message, data=data)
    return JSONResponse(status_code=status.HTTP_200_OK, content=payload.model_dump(exclude_none=True))


def _error(message: str, status_code: int = status.HTTP_400_BAD_REQUEST) -> JSONResponse:
    payload = ApiResponse(success=False, error=message)
    return JSONResponse(status_code=status_code, content=payload.model_dump(exclude_none=True))


def create_app(*, settings: Settings | None = None, dependencies: AppDependencies | None = None) -> FastAPI:
    """Build the admin API.

    Raises:
        ConfigurationError: when no dependencies are supplied and the graph
            credentials in ``settings`` are missing or invalid.
    """

    settings = settings or get_settings()
    configure_logging(settings.log_level)
    deps = dependencies or _build_dependencies(settings)

    logger = get_logger("api")
    app = FastAPI(title="optigraph admin API", version="0.1.0")
    app.state.dependencies = deps
    basic_auth = HTTPBasic(auto_error=False, realm="Admin Dashboard")

    @app.middleware("http")
    async def add_correlation_id(request: Request, call_next):  # type: ignore[override]
        correlation_id = request.headers.get("X-Request-ID", uuid4().hex)
        request.state.correlation_id = correlation_id
        bind_correlation_id(correlation_id)
        try:
            response = await call_next(request)
        finally:
            clear_correlation_id()
        response.headers["X-Correlation-ID"] = correlation_id
        return response

    def require_admin(credentials: HTTPBasicCredentials | None = Depends(basic_auth)) -> None:
        if not settings.admin_configured:
            # Unconfigured admin surface is indistinguishable from a missing route.
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")
        valid = (
            credentials is not None
            and secrets.compare_digest(credentials.username.encode("utf-8"), settings.admin_username.encode("utf-8"))
            and secrets.compare_digest(credentials.password.encode("utf-8"), settings.admin_password.encode("utf-8"))
        )
        if not valid:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Unauthorized",
                headers={"WWW-Authenticate": 'Basic realm="Admin Dashboard"'},
            )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        first = exc.errors()[0] if exc.errors() else {}
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = first.get("msg", "Invalid request")
        return _error(f"{location}: {message}" if location else message)

    @app.exception_handler(GraphRequestError)
    async def handle_graph_rejection(request: Request, exc: GraphRequestError) -> JSONResponse:
        logger.warning("graph.rejected", action=exc.action, status_code=exc.status_code)
        return _error(str(exc), exc.status_code)

    @app.exception_handler(httpx.HTTPError)
    async def handle_transport_error(request: Request, exc: httpx.HTTPError) -> JSONResponse:
        logger.error("graph.unreachable", correlation_id=get_correlation_id(), detail=str(exc))
        return _error("Unable to reach the content graph", status.HTTP_500_INTERNAL_SERVER_ERROR)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        correlation_id = getattr(request.state, "correlation_id", uuid4().hex)
        logger.error("unhandled.error", correlation_id=correlation_id, detail=str(exc))
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "error": "Internal Server Error", "correlation_id": correlation_id},
        )

    def get_dependencies(request: Request) -> AppDependencies:
        return request.app.state.dependencies

    def get_graph_client(dep: AppDependencies = Depends(get_dependencies)) -> GraphClient:
        return dep.graph_client

    def get_i18n(dep: AppDependencies = Depends(get_dependencies)) -> I18nConfig:
        return dep.i18n

    @app.get(f"{API_PREFIX}/synonyms.json")
    async def synonyms_info(_auth: None = Depends(require_admin)) -> dict[str, str]:
        return {"message": "Content graph synonyms API - use POST to upload synonyms"}

    @app.post(
        f"{API_PREFIX}/synonyms.json",
        response_model=SynonymUploadResponse,
        responses={400: {"model": SynonymErrorResponse}},
    )
    async def upload_synonyms(
        payload: SynonymUploadRequest,
        client: GraphClient = Depends(get_graph_client),
        _auth: None = Depends(require_admin),
    ) -> Response:
        result = await client.upload_synonyms(
            payload.synonyms or "",
            slot=payload.synonym_slot,
            language_routing=payload.language_routing,
        )
        if result.success:
            return JSONResponse(content=SynonymUploadResponse(success=True, message=result.message).model_dump())
        logger.warning("synonyms.upload_failed", slot=payload.synonym_slot, detail=result.error)
        body = SynonymErrorResponse(error=result.message, details=result.error)
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=body.model_dump())

    @app.post(f"{API_PREFIX}/content-search.json")
    async def search_content(
        payload: ContentSearchRequest,
        client: GraphClient = Depends(get_graph_client),
        _auth: None = Depends(require_admin),
    ) -> Response:
        query = (payload.query or "").strip()
        if not query:
            return _error("Search query is required")
        limit = clamp_number(payload.limit, MIN_SEARCH_LIMIT, MAX_SEARCH_LIMIT)
        result = await client.search_content(CONTENT_SEARCH_QUERY, {"searchTerm": query, "limit": limit})
        if result.error:
            logger.warning("content_search.failed", detail=result.error)
            return _error(result.error, status.HTTP_500_INTERNAL_SERVER_ERROR)
        items = [item.to_dict() for item in result.items]
        return _success(items, f"Found {len(items)} content items")

    @app.get(f"{API_PREFIX}/content-search.json")
    async def recent_content(
        limit: int = 20,
        content_type: str = Query(default="", alias="contentType"),
        client: GraphClient = Depends(get_graph_client),
        _auth: None = Depends(require_admin),
    ) -> Response:
        content_type = content_type.strip()
        if content_type and not is_valid_content_type(content_type):
            return _error(f"Invalid content type: {content_type}")
        clamped = clamp_number(limit, MIN_SEARCH_LIMIT, MAX_SEARCH_LIMIT)
        result = await client.search_content(recent_content_query(content_type or None), {"limit": clamped})
        if result.error:
            logger.warning("recent_content.failed", detail=result.error)
            return _error(result.error, status.HTTP_500_INTERNAL_SERVER_ERROR)
        items = [item.to_dict() for item in result.items]
        return _success(items, f"Found {len(items)} recent content items")

    @app.get(f"{API_PREFIX}/pinned-collections.json")
    async def list_collections(
        client: GraphClient = Depends(get_graph_client),
        _auth: None = Depends(require_admin),
    ) -> Response:
        return _success(await client.list_pinned_collections())

    @app.post(f"{API_PREFIX}/pinned-collections.json")
    async def create_collection(
        payload: CollectionCreateRequest,
        client: GraphClient = Depends(get_graph_client),
        _auth: None = Depends(require_admin),
    ) -> Response:
        title = sanitize_input(payload.title or "")
        if not title:
            return _error("Collection title is required")
        result = await client.create_pinned_collection(title, is_active=payload.is_active)
        return _success(result, f'Collection "{title}" created successfully')

    @app.put(f"{API_PREFIX}/pinned-collections.json")
    async def update_collection(
        payload: CollectionUpdateRequest,
        client: GraphClient = Depends(get_graph_client),
        _auth: None = Depends(require_admin),
    ) -> Response:
        if not payload.id:
            return _error("Collection ID is required")
        title = sanitize_input(payload.title) if payload.title is not None else None
        result = await client.update_pinned_collection(payload.id, title=title, is_active=payload.is_active)
        return _success(result, "Collection updated successfully")

    @app.delete(f"{API_PREFIX}/pinned-collections.json")
    async def delete_collection(
        payload: CollectionDeleteRequest,
        client: GraphClient = Depends(get_graph_client),
        _auth: None = Depends(require_admin),
    ) -> Response:
        if not payload.id:
            return _error("Collection ID is required")
        await client.delete_pinned_collection(payload.id)
        return _success(message="Collection deleted successfully")

    @app.get(f"{API_PREFIX}/pinned-items.json")
    async def list_pinned_items(
        collection_id: str = Query(default="", alias="collectionId"),
        client: GraphClient = Depends(get_graph_client),
        _auth: None = Depends(require_admin),
    ) -> Response:
        if not collection_id:
            return _error("Collection ID is required")
        return _success(await client.list_pinned_items(collection_id))

    @app.post(f"{API_PREFIX}/pinned-items.json")
    async def add_pinned_item(
        payload: PinnedItemCreateRequest,
        client: GraphClient = Depends(get_graph_client),
        _auth: None = Depends(require_admin),
    ) -> Response:
        if not payload.collection_id:
            return _error("Collection ID is required")
        if isinstance(payload.phrases, list):
            phrases = [sanitize_input(phrase) for phrase in payload.phrases if phrase.strip()]
        else:
            phrases = parse_csv_phrases(payload.phrases or "")
        if not phrases:
            return _error("At least one search phrase is required")
        if not payload.target_key:
            return _error("Content GUID (targetKey) is required")
        if not is_valid_guid(payload.target_key):
            return _error("Content GUID (targetKey) is not a valid GUID")
        if not is_valid_language_code(payload.language):
            return _error(f"Invalid language code: {payload.language}")
        result = await client.add_pinned_item(
            payload.collection_id,
            phrases=phrases,
            target_key=payload.target_key,
            language=payload.language,
            priority=payload.priority,
            is_active=payload.is_active,
        )
        return _success(result, "Pinned item added successfully")

    @app.delete(f"{API_PREFIX}/pinned-items.json")
    async def delete_pinned_item(
        payload: PinnedItemDeleteRequest,
        client: GraphClient = Depends(get_graph_client),
        _auth: None = Depends(require_admin),
    ) -> Response:
        if not payload.collection_id or not payload.item_id:
            return _error("Collection ID and Item ID are required")
        await client.delete_pinned_item(payload.collection_id, payload.item_id)
        return _success(message="Pinned item deleted successfully")

    @app.get(f"{API_PREFIX}/locales.json")
    async def list_locales(
        i18n: I18nConfig = Depends(get_i18n),
        _auth: None = Depends(require_admin),
    ) -> Response:
        chain = i18n.fallback_chain
        body = LocalesResponse(
            default_locale=i18n.default_locale,
            fallback_type=i18n.fallback_type,
            locales=[
                LocaleEntry(
                    locale=locale,
                    backend_locale=to_backend_locale(locale),
                    fallback_chain=list(chain.walk(locale))[1:],
                )
                for locale in i18n.locales
            ],
        )
        return _success(body.model_dump(by_alias=True))

    @app.get("/metrics")
    async def metrics() -> Response:
        payload = generate_latest()
        return Response(content=payload, media_type=CONTENT_TYPE_LATEST)

    @app.get("/healthz")
    async def healthcheck() -> dict[str, str]:
        from optigraph import __version__

        return {"status": "ok", "version": __version__, "environment": settings.environment}

    @app.get("/livez")
    async def liveness() -> dict[str, str]:
        return {"status": "alive"}

    return app


def __getattr__(name: str) -> FastAPI:
    # ``uvicorn optigraph.api.app:app`` builds the app on first access.
    if name == "app":
        return create_app()
    raise AttributeError(name)
