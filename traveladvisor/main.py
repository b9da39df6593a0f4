import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from traveladvisor.api.routers.admin import router as admin_router
from traveladvisor.api.routers.ai import router as ai_router
from traveladvisor.api.routers.events import router as events_router
from traveladvisor.api.routers.geo import router as geo_router
from traveladvisor.api.routers.hotels import router as hotels_router
from traveladvisor.api.routers.places import router as places_router
from traveladvisor.api.routers.transport import router as transport_router
from traveladvisor.api.routers.trips import router as trips_router
from traveladvisor.core.csrf_middleware import CSRFProtectionMiddleware
from traveladvisor.core.errors import register_error_handlers
from traveladvisor.core.settings import get_settings

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def create_app() -> FastAPI:
    settings = get_settings()
    application = FastAPI(title="Travel Advisor Backend")

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    # CSRF Protection: Validate Origin header for state-changing requests
    application.add_middleware(
        CSRFProtectionMiddleware, allowed_origins=settings.allowed_origins
    )

    register_error_handlers(application)

    @application.get("/healthz", tags=["health"])
    def healthz() -> dict[str, str]:
        return {"status": "ok"}

    application.include_router(ai_router)
    application.include_router(places_router)
    application.include_router(geo_router)
    application.include_router(hotels_router)
    application.include_router(events_router)
    application.include_router(trips_router)
    application.include_router(admin_router)
    application.include_router(transport_router)
    return application


app = create_app()
