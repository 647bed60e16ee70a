"""FastAPI application: public lite pages plus the management API."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import date, timedelta
from pathlib import Path

from fastapi import APIRouter, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse, Response
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError

from litepages.config import get_database_url, local_today, public_url, qr_settings, server_settings
from litepages.database import Database
from litepages.errors import AggregationError, NotFound, QuoteError, RenderError, SlugTaken
from litepages.events import Event, EventBus, EventType
from litepages.modules.availability import AvailabilityCalendar
from litepages.modules.content import ContentAggregator
from litepages.modules.offers import OfferResolver
from litepages.modules.qr import generate_qr_png, qr_data_uri
from litepages.modules.qr.generator import clamp_size
from litepages.modules.registry import LiteDraft, SlugRegistry
from litepages.modules.rendering import (
    render_error,
    render_full_page,
    render_home,
    render_not_found,
    render_print_card,
    render_promo_card,
)
from litepages.modules.views import ViewCounter
from litepages.schemas import LiteCreate, LiteUpdate
from litepages.text import localized_text

logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).resolve().parent / "static"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
AVAILABILITY_WINDOW_DAYS = 60


@dataclass
class Services:
    database: Database
    bus: EventBus
    registry: SlugRegistry
    calendar: AvailabilityCalendar
    offers: OfferResolver
    aggregator: ContentAggregator
    views: ViewCounter


def build_services(database: Database) -> Services:
    """Wire every component around one database handle and one event bus."""
    bus = EventBus()
    calendar = AvailabilityCalendar(database)
    offers = OfferResolver(database)
    views = ViewCounter(database)
    views.setup_event_handlers(bus)
    return Services(
        database=database,
        bus=bus,
        registry=SlugRegistry(database),
        calendar=calendar,
        offers=offers,
        aggregator=ContentAggregator(database, calendar, offers),
        views=views,
    )


def _services(request: Request) -> Services:
    return request.app.state.services


router = APIRouter()


# ---------------------------------------------------------------------------
# Management API (declared before the slug routes)
# ---------------------------------------------------------------------------

@router.get("/api/check-slug/{slug}")
async def check_slug(slug: str, request: Request):
    return {"available": _services(request).registry.check_available(slug)}


@router.get("/api/property/{property_id}")
async def lite_for_property(property_id: int, request: Request):
    lite = _services(request).registry.for_property(property_id)
    return {"success": True, "lite": lite.to_dict() if lite else None}


@router.get("/api/room/{unit_id}")
async def lite_for_room(unit_id: int, request: Request):
    lite = _services(request).registry.for_unit(unit_id)
    return {"success": True, "lite": lite.to_dict() if lite else None}


@router.post("/api/room/{unit_id}/lite")
async def get_or_create_room_lite(unit_id: int, request: Request):
    """Return the room's lite page, creating one with a numeric slug on first use."""
    lite, created = _services(request).registry.get_or_create_for_unit(unit_id)
    return {"success": True, "lite": lite.to_dict(), "created": created}


@router.get("/api/account/{account_id}")
async def lites_for_account(account_id: int, request: Request):
    lites = []
    for lite in _services(request).registry.list_by_account(account_id):
        row = lite.to_dict()
        row["property_name"] = lite.prop.name if lite.prop else None
        row["city"] = lite.prop.city if lite.prop else None
        row["room_name"] = lite.unit.name if lite.unit else None
        row["display_name"] = localized_text(lite.unit.display_name) if lite.unit else None
        lites.append(row)
    return {"success": True, "lites": lites}


@router.post("/api/lites")
async def create_lite(body: LiteCreate, request: Request):
    lite = _services(request).registry.create(LiteDraft(
        property_id=body.property_id,
        slug=body.slug,
        account_id=body.account_id,
        unit_id=body.room_id,
        custom_title=body.custom_title,
        custom_tagline=body.custom_tagline,
        theme=body.theme,
        accent_color=body.accent_color,
    ))
    return {"success": True, "lite": lite.to_dict()}


@router.put("/api/lites/{lite_id}")
async def update_lite(lite_id: int, body: LiteUpdate, request: Request):
    lite = _services(request).registry.update(lite_id, body.model_dump(exclude_unset=True))
    return {"success": True, "lite": lite.to_dict()}


@router.delete("/api/lites/{lite_id}")
async def delete_lite(lite_id: int, request: Request):
    _services(request).registry.remove(lite_id)
    return {"success": True}


@router.get("/api/availability/{unit_id}")
async def availability(
    unit_id: int,
    request: Request,
    date_from: date | None = Query(default=None, alias="from"),
    date_to: date | None = Query(default=None, alias="to"),
):
    start = date_from or local_today()
    end = date_to or start + timedelta(days=AVAILABILITY_WINDOW_DAYS)
    rows = _services(request).calendar.date_range(unit_id, start, end)
    return {"success": True, "availability": rows}


@router.get("/api/pricing/{unit_id}")
async def pricing(
    unit_id: int,
    request: Request,
    checkin: date,
    checkout: date,
    adults: int = Query(default=1, ge=1),
    children: int = Query(default=0, ge=0),
):
    quote = _services(request).calendar.quote(unit_id, checkin, checkout, adults, children)
    return {"success": True, "pricing": quote.to_dict()}


@router.get("/api/taxes/{unit_id}")
async def taxes(
    unit_id: int,
    request: Request,
    nights: int = Query(default=1, ge=1),
    guests: int = Query(default=1, ge=1),
    subtotal: float = Query(default=0.0, ge=0),
):
    breakdown = _services(request).calendar.taxes(unit_id, nights, guests, subtotal)
    return {"success": True, **breakdown.to_dict()}


@router.get("/api/offers/{property_id}")
async def website_offers(
    property_id: int,
    request: Request,
    checkin: date | None = None,
    checkout: date | None = None,
    room_id: int | None = Query(default=None, alias="roomId"),
    account_id: int | None = Query(default=None, alias="accountId"),
):
    """Offers the booking sidebar can show; filtered by the stay when both dates are sent."""
    offers = _services(request).offers.eligible(
        property_id,
        account_id=account_id,
        unit_id=room_id,
        checkin=checkin,
        checkout=checkout,
        today=local_today(),
    )
    return {"success": True, "offers": [offer.to_dict() for offer in offers]}


# ---------------------------------------------------------------------------
# Public pages
# ---------------------------------------------------------------------------

@router.get("/", response_class=HTMLResponse)
async def home():
    return HTMLResponse(render_home())


@router.get("/{slug}", response_class=HTMLResponse)
async def lite_page(slug: str, request: Request, offer: str | None = None):
    """Full landing page. Counts a view once the page has rendered."""
    services = _services(request)
    lite = services.registry.resolve(slug)
    data = services.aggregator.aggregate(lite, offer_code=offer)
    cfg = qr_settings()
    page_url = public_url(lite.slug)
    qr_src = qr_data_uri(page_url, cfg.get("page_size", 200), cfg.get("margin", 2))
    html = render_full_page(data, page_url, qr_src)
    services.bus.publish(Event(
        event_type=EventType.LITE_VIEWED,
        lite_id=lite.id,
        slug=lite.slug,
    ))
    return HTMLResponse(html)


@router.get("/{slug}/card", response_class=HTMLResponse)
async def promo_card(slug: str, request: Request, offer: str | None = None):
    services = _services(request)
    lite = services.registry.resolve(slug)
    data = services.aggregator.aggregate(lite, offer_code=offer)
    cfg = qr_settings()
    page_url = public_url(lite.slug)
    qr_src = qr_data_uri(page_url, cfg.get("card_size", 200), cfg.get("card_margin", 1))
    return HTMLResponse(render_promo_card(data, page_url, qr_src))


@router.get("/{slug}/qr")
async def qr_image(slug: str, size: str | None = None):
    """PNG QR code for the page URL. The slug is not looked up."""
    cfg = qr_settings()
    size = clamp_size(size, default=cfg.get("default_size", 300))
    png = generate_qr_png(public_url(slug.lower()), size, cfg.get("margin", 2))
    return Response(content=png, media_type="image/png")


@router.get("/{slug}/print", response_class=HTMLResponse)
async def print_card(slug: str, request: Request):
    services = _services(request)
    lite = services.registry.resolve(slug)
    data = services.aggregator.aggregate(lite)
    cfg = qr_settings()
    page_url = public_url(lite.slug)
    qr_src = qr_data_uri(page_url, cfg.get("print_size", 400), cfg.get("margin", 2))
    return HTMLResponse(render_print_card(data, page_url, qr_src))


# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------

def _is_api(request: Request) -> bool:
    return request.url.path.startswith("/api/")


def _is_plain(request: Request) -> bool:
    return request.url.path.endswith(("/qr", "/print"))


async def handle_not_found(request: Request, exc: NotFound):
    if _is_api(request):
        return JSONResponse({"success": False, "error": "Not found"}, status_code=404)
    if _is_plain(request):
        return PlainTextResponse("Not found", status_code=404)
    return HTMLResponse(render_not_found(request.path_params.get("slug", "")), status_code=404)


async def handle_server_error(request: Request, exc: Exception):
    logger.error("Request %s failed: %s", request.url.path, exc, exc_info=exc)
    if _is_api(request):
        return JSONResponse({"success": False, "error": "Internal error"}, status_code=500)
    if _is_plain(request):
        return PlainTextResponse("Error", status_code=500)
    return HTMLResponse(render_error(), status_code=500)


async def handle_render_error(request: Request, exc: RenderError):
    logger.error("Render failed for %s: %s", request.url.path, exc)
    return PlainTextResponse(str(exc), status_code=500)


async def handle_api_rejection(request: Request, exc: Exception):
    """Slug collisions and unpriceable stays are answered as 200 JSON."""
    return JSONResponse({"success": False, "error": str(exc)})


def create_app(database: Database | None = None) -> FastAPI:
    """Build the application around ``database`` (default: ``DATABASE_URL``)."""
    owns_database = database is None
    if database is None:
        database = Database(get_database_url())
    services = build_services(database)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup and shutdown events."""
        logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
        logger.info("Starting LitePages...")
        database.init_db()
        yield
        if owns_database:
            database.dispose()
        logger.info("LitePages shut down.")

    app = FastAPI(title="LitePages", lifespan=lifespan)
    app.state.services = services

    origins = server_settings().get("cors_origins") or ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(NotFound, handle_not_found)
    app.add_exception_handler(AggregationError, handle_server_error)
    app.add_exception_handler(SQLAlchemyError, handle_server_error)
    app.add_exception_handler(RenderError, handle_render_error)
    app.add_exception_handler(SlugTaken, handle_api_rejection)
    app.add_exception_handler(QuoteError, handle_api_rejection)

    app.include_router(router)
    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")
    return app


app = create_app()


def main() -> None:
    """Entry point for running the app."""
    import uvicorn

    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
    cfg = server_settings()
    uvicorn.run(
        "litepages.app:app",
        host=cfg.get("host", "127.0.0.1"),
        port=int(cfg.get("port", 8000)),
    )


if __name__ == "__main__":
    main()
