"""Client directory API."""

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_async_db
from services.auth import get_current_user
from services.clients.service import ClientService
from shared.client_models import ClientCreateRequest, ClientUpdateRequest, SortOrder
from shared.response_models import APIResponse

router = APIRouter(prefix="/clients", tags=["Clients"], dependencies=[Depends(get_current_user)])


def get_client_service(session: AsyncSession = Depends(get_async_db)) -> ClientService:
    return ClientService(session)


@router.get("", response_model=APIResponse, summary="List Clients")
async def list_clients(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    sort_by: str = Query("created_at"),
    sort_order: SortOrder = Query(SortOrder.DESC),
    search: str | None = Query(None),
    service: ClientService = Depends(get_client_service),
) -> APIResponse:
    """Paginated client list with optional text search."""
    result = await service.list_clients(
        page=page, limit=limit, sort_by=sort_by, sort_order=sort_order, search=search
    )
    return APIResponse(data=result)


@router.get("/search", response_model=APIResponse, summary="Search Clients")
async def search_clients(
    q: str = Query(..., min_length=1),
    service: ClientService = Depends(get_client_service),
) -> APIResponse:
    return APIResponse(data=await service.search(q))


@router.get("/stats", response_model=APIResponse, summary="Client Statistics")
async def client_stats(service: ClientService = Depends(get_client_service)) -> APIResponse:
    return APIResponse(data=await service.get_stats())


@router.get("/{client_id}", response_model=APIResponse, summary="Get Client")
async def get_client(client_id: str, service: ClientService = Depends(get_client_service)) -> APIResponse:
    return APIResponse(data=await service.get(client_id))


@router.post("", response_model=APIResponse, status_code=201, summary="Create Client")
async def create_client(
    request: ClientCreateRequest,
    service: ClientService = Depends(get_client_service),
) -> APIResponse:
    result = await service.create(request)
    return APIResponse(message="Client created", data=result)


@router.put("/{client_id}", response_model=APIResponse, summary="Update Client")
async def update_client(
    client_id: str,
    request: ClientUpdateRequest,
    service: ClientService = Depends(get_client_service),
) -> APIResponse:
    result = await service.update(client_id, request)
    return APIResponse(message="Client updated", data=result)


@router.delete("/{client_id}", status_code=204, summary="Delete Client")
async def delete_client(client_id: str, service: ClientService = Depends(get_client_service)) -> Response:
    await service.delete(client_id)
    return Response(status_code=204)
