"""Client directory endpoints (firm-scoped)."""

from fastapi import APIRouter, Depends, Query, status

from clientdesk.application.schemas.client import (
    ClientCreate,
    ClientListQuery,
    ClientResponse,
    ClientSearchResult,
    ClientStatsResponse,
    ClientUpdate,
)
from clientdesk.application.schemas.common import ApiResponse, PaginatedResponse, PaginationMeta
from clientdesk.application.services import ClientDirectoryService
from clientdesk.domain.entities import Actor
from clientdesk.infrastructure.dependencies import get_client_directory_service, get_current_actor

router = APIRouter(prefix="/clients", tags=["Clients"])


@router.post(
    "",
    response_model=ApiResponse[ClientResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_client(
    data: ClientCreate,
    actor: Actor = Depends(get_current_actor),
    service: ClientDirectoryService = Depends(get_client_directory_service),
) -> ApiResponse[ClientResponse]:
    client = await service.create_client(actor, data)
    return ApiResponse(
        message="Client created successfully",
        data=ClientResponse.model_validate(client, from_attributes=True),
    )


@router.get("", response_model=PaginatedResponse[ClientResponse])
async def list_clients(
    query: ClientListQuery = Depends(),
    actor: Actor = Depends(get_current_actor),
    service: ClientDirectoryService = Depends(get_client_directory_service),
) -> PaginatedResponse[ClientResponse]:
    """Paginated client list; ``status=all`` includes every status."""
    page = await service.list_clients(actor, query)
    return PaginatedResponse(
        data=[ClientResponse.model_validate(c, from_attributes=True) for c in page.clients],
        pagination=PaginationMeta(
            page=page.page,
            limit=page.limit,
            total=page.total,
            pages=page.pages,
        ),
    )


# Fixed paths must be registered before /{client_id}
@router.get("/search", response_model=ApiResponse[list[ClientSearchResult]])
async def search_clients(
    q: str | None = Query(None, description="At least 2 non-space characters"),
    limit: int = Query(10, ge=1, le=100),
    actor: Actor = Depends(get_current_actor),
    service: ClientDirectoryService = Depends(get_client_directory_service),
) -> ApiResponse[list[ClientSearchResult]]:
    """Typeahead over active clients."""
    clients = await service.search_clients(actor, q, limit)
    return ApiResponse(
        data=[ClientSearchResult.model_validate(c, from_attributes=True) for c in clients]
    )


@router.get("/stats", response_model=ApiResponse[ClientStatsResponse])
async def client_stats(
    actor: Actor = Depends(get_current_actor),
    service: ClientDirectoryService = Depends(get_client_directory_service),
) -> ApiResponse[ClientStatsResponse]:
    stats = await service.get_stats(actor)
    return ApiResponse(data=ClientStatsResponse.model_validate(stats, from_attributes=True))


@router.get("/{client_id}", response_model=ApiResponse[ClientResponse])
async def get_client(
    client_id: str,
    actor: Actor = Depends(get_current_actor),
    service: ClientDirectoryService = Depends(get_client_directory_service),
) -> ApiResponse[ClientResponse]:
    client = await service.get_client(actor, client_id)
    return ApiResponse(data=ClientResponse.model_validate(client, from_attributes=True))


@router.put("/{client_id}", response_model=ApiResponse[ClientResponse])
async def update_client(
    client_id: str,
    data: ClientUpdate,
    actor: Actor = Depends(get_current_actor),
    service: ClientDirectoryService = Depends(get_client_directory_service),
) -> ApiResponse[ClientResponse]:
    """Partial update; only fields present in the body are applied."""
    client = await service.update_client(actor, client_id, data)
    return ApiResponse(
        message="Client updated successfully",
        data=ClientResponse.model_validate(client, from_attributes=True),
    )


@router.delete("/{client_id}", response_model=ApiResponse[None])
async def delete_client(
    client_id: str,
    actor: Actor = Depends(get_current_actor),
    service: ClientDirectoryService = Depends(get_client_directory_service),
) -> ApiResponse[None]:
    await service.delete_client(actor, client_id)
    return ApiResponse(message="Client deleted successfully")
