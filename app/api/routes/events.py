from typing import Callable
from fastapi import APIRouter, Depends, Query, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute
from starlette.exceptions import HTTPException
from app.schemas import EventCreate, EventUpdate, EventOut, EventEnvelope, EventList, MessageOut
from app.db.session import get_session, database
from app.services.event_service import EventService
from app.core.errors import DomainError, InvalidInputError, NotFoundError
from app.core.logging import logger
from app.core.validators import is_valid_slug
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/events", tags=["events"])


def get_event_service(session: AsyncSession = Depends(get_session)) -> EventService:
    return EventService(session)


def normalized_slug(slug: str) -> str:
    """
    Trim and lowercase the ``{slug}`` path segment and check its shape.

    The segment arrives percent-decoded once by the router. Declared ahead of
    the service dependency so malformed slugs are rejected before a database
    session is opened.
    """
    value = slug.strip().lower()
    if not value:
        raise InvalidInputError("Missing required route parameter: slug")
    if not is_valid_slug(value):
        raise InvalidInputError("Invalid slug format")
    return value


class EventLookupRoute(APIRoute):
    """
    Route that renders unexpected failures as the event-lookup 500 body.

    Wraps the whole handler, dependency resolution included, so a database
    that cannot be reached while opening the session is reported the same way
    as a failing query.
    """

    def get_route_handler(self) -> Callable:
        original_route_handler = super().get_route_handler()

        async def lookup_route_handler(request: Request) -> Response:
            try:
                return await original_route_handler(request)
            except (HTTPException, RequestValidationError):
                raise
            except DomainError as e:
                if e.status_code < 500:
                    raise
                cause = e.__cause__ or e
                error = e.detail or e.message
            except Exception as e:
                cause = e
                error = str(e)

            logger.opt(exception=cause).error(f"{request.method} {request.url.path} failed")
            await database.reset_on_disconnect(cause)
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"message": "Unexpected error while fetching event", "error": error},
            )

        return lookup_route_handler


@router.get("", response_model=EventList)
async def get_events(
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    per_page: int = Query(20, ge=1, le=100, description="Number of items per page"),
    event_service: EventService = Depends(get_event_service)
):
    """
    List events, newest first.
    - page: Page number, 1-indexed (default: 1)
    - per_page: Number of items per page (default: 20, max: 100)
    """
    skip = (page - 1) * per_page
    total, events = await event_service.list_events_paginated(skip=skip, limit=per_page)
    return EventList(events=[EventOut.model_validate(ev) for ev in events], total=total)


@router.post(
    "",
    response_model=EventEnvelope,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": MessageOut}, 409: {"model": MessageOut}},
)
async def create_event_endpoint(
    payload: EventCreate,
    event_service: EventService = Depends(get_event_service)
):
    ev = await event_service.create_event(payload)
    return EventEnvelope(event=EventOut.model_validate(ev))


async def get_event_detail(
    event_slug: str = Depends(normalized_slug),
    event_service: EventService = Depends(get_event_service)
):
    ev = await event_service.get_event_by_slug(event_slug)
    if not ev:
        raise NotFoundError(f"Event not found for slug: {event_slug}")
    return EventEnvelope(event=EventOut.model_validate(ev))


router.add_api_route(
    "/{slug}",
    get_event_detail,
    methods=["GET"],
    response_model=EventEnvelope,
    responses={400: {"model": MessageOut}, 404: {"model": MessageOut}, 500: {"model": MessageOut}},
    route_class_override=EventLookupRoute,
)


@router.patch(
    "/{slug}",
    response_model=EventEnvelope,
    responses={400: {"model": MessageOut}, 404: {"model": MessageOut}, 409: {"model": MessageOut}},
)
async def update_event_endpoint(
    payload: EventUpdate,
    event_slug: str = Depends(normalized_slug),
    event_service: EventService = Depends(get_event_service)
):
    ev = await event_service.update_event(event_slug, payload)
    return EventEnvelope(event=EventOut.model_validate(ev))
