"""Client directory CRUD."""

from __future__ import annotations

import math
from datetime import datetime

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from models.database import Client
from shared.client_models import (
    ClientCreateRequest,
    ClientPage,
    ClientResponse,
    ClientStats,
    ClientUpdateRequest,
    Pagination,
    SocialMedia,
    SortOrder,
)
from shared.errors import NotFoundError
from shared.logging_utils import setup_logging
from shared.time_utils import ensure_utc, utcnow

logger = setup_logging("client-service")

SORTABLE_FIELDS = {"name", "position", "election_date", "campaign_start", "political_party", "created_at", "updated_at"}
SEARCH_LIMIT = 20


def to_response(client: Client) -> ClientResponse:
    return ClientResponse(
        id=client.id,
        name=client.name,
        position=client.position,
        election_date=client.election_date,
        campaign_start=client.campaign_start,
        image_url=client.image_url,
        political_party=client.political_party,
        party_logo_url=client.party_logo_url,
        color=client.color,
        social_media=SocialMedia.model_validate(client.social_media or {}),
        is_active=client.is_active,
        created_at=ensure_utc(client.created_at),
        updated_at=ensure_utc(client.updated_at),
    )


def _search_filter(term: str):
    pattern = f"%{term.lower()}%"
    return or_(
        func.lower(Client.name).like(pattern),
        func.lower(Client.position).like(pattern),
        func.lower(Client.political_party).like(pattern),
    )


class ClientService:
    """Manage client directory entries."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _get(self, client_id: str) -> Client:
        client = await self.session.get(Client, client_id)
        if client is None:
            raise NotFoundError("Client not found")
        return client

    async def list_clients(
        self,
        page: int = 1,
        limit: int = 10,
        sort_by: str = "created_at",
        sort_order: SortOrder = SortOrder.DESC,
        search: str | None = None,
    ) -> ClientPage:
        page = max(page, 1)
        limit = max(limit, 1)
        column = getattr(Client, sort_by if sort_by in SORTABLE_FIELDS else "created_at")
        ordering = column.asc() if sort_order == SortOrder.ASC else column.desc()

        query = select(Client)
        count_query = select(func.count()).select_from(Client)
        if search:
            query = query.where(_search_filter(search))
            count_query = count_query.where(_search_filter(search))

        total = (await self.session.execute(count_query)).scalar_one()
        result = await self.session.execute(
            query.order_by(ordering, Client.id).offset((page - 1) * limit).limit(limit)
        )
        total_pages = math.ceil(total / limit)

        return ClientPage(
            data=[to_response(client) for client in result.scalars().all()],
            pagination=Pagination(
                page=page,
                limit=limit,
                total=total,
                total_pages=total_pages,
                has_next=page < total_pages,
                has_prev=page > 1,
            ),
        )

    async def search(self, query: str) -> list[ClientResponse]:
        result = await self.session.execute(
            select(Client).where(_search_filter(query)).order_by(Client.name).limit(SEARCH_LIMIT)
        )
        return [to_response(client) for client in result.scalars().all()]

    async def get_stats(self, now: datetime | None = None) -> ClientStats:
        now = now or utcnow()
        start_of_month = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)

        async def count(*conditions) -> int:
            result = await self.session.execute(select(func.count()).select_from(Client).where(*conditions))
            return result.scalar_one()

        return ClientStats(
            total=await count(),
            active=await count(Client.is_active.is_(True)),
            inactive=await count(Client.is_active.is_(False)),
            this_month=await count(Client.created_at >= start_of_month),
        )

    async def get(self, client_id: str) -> ClientResponse:
        return to_response(await self._get(client_id))

    async def create(self, request: ClientCreateRequest) -> ClientResponse:
        data = request.model_dump()
        data["social_media"] = data.get("social_media") or {}
        client = Client(**data)
        self.session.add(client)
        await self.session.commit()
        logger.info(f"Created client {client.id}")
        return to_response(client)

    async def update(self, client_id: str, request: ClientUpdateRequest) -> ClientResponse:
        client = await self._get(client_id)
        for field, value in request.model_dump(exclude_unset=True).items():
            if value is None and field in {"name", "position", "election_date", "campaign_start", "is_active"}:
                continue
            if field == "social_media":
                value = value or {}
            setattr(client, field, value)
        await self.session.commit()
        logger.info(f"Updated client {client.id}")
        return to_response(client)

    async def delete(self, client_id: str) -> None:
        client = await self._get(client_id)
        await self.session.delete(client)
        await self.session.commit()
        logger.info(f"Deleted client {client_id}")
