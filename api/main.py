"""Relief Posts API - FastAPI service.

Serves the relief post list filtered by the user's saved or live
location and their province/ward selection, plus the region catalog
that feeds the selectors.

The service holds one selection session backed by the configured
profile store.

Run with the app factory:

    uvicorn api.main:create_app --factory
"""

import asyncio
import logging
import os
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel, Field

from src.coordinator import RegionSelectionCoordinator
from src.core.config import Config, validate_coordinates
from src.core.filters import filter_posts
from src.core.geo import Coordinate, distance_km
from src.core.post import RelievePost
from src.core.region import Region
from src.preferences import PreferenceSynchronizer
from src.shell.config_loader import load_config, load_config_from_env
from src.shell.post_repository import PostRepository, YamlPostRepository
from src.shell.profile_store import (
    FirestoreProfileConfig,
    FirestoreProfileStore,
    InMemoryProfileStore,
    ProfileStore,
)
from src.shell.region_client import RegionClient


log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# ===== Request Models =====

class SelectionUpdate(BaseModel):
    province_code: str | None = None
    ward_code: str | None = None
    radius_km: float | None = Field(default=None, ge=0)


class LocationUpdate(BaseModel):
    latitude: float
    longitude: float


# ===== Wiring =====

def _get_config() -> Config:
    """Load configuration from file or environment."""
    config_path = os.environ.get("CONFIG_PATH")

    if config_path:
        return load_config(config_path)
    elif os.environ.get("PROFILE_STORE"):
        return load_config_from_env()
    else:
        return load_config()


def _build_profile_store(config: Config) -> ProfileStore:
    """Create the profile store named in the config."""
    if config.profile_store == "firestore":
        return FirestoreProfileStore(
            FirestoreProfileConfig(
                database=config.firestore_database,
                collection=config.firestore_collection,
                document=config.profile_document,
            )
        )
    return InMemoryProfileStore()


def create_app(
    config: Config | None = None,
    region_client: RegionClient | None = None,
    profile_store: ProfileStore | None = None,
    post_repository: PostRepository | None = None,
) -> FastAPI:
    """Build the API with its collaborators.

    Args:
        config: Application configuration (loaded if not provided)
        region_client: Region client (created if not provided)
        profile_store: Profile store (created from config if not provided)
        post_repository: Post repository (created from config if not provided)

    Returns:
        Configured FastAPI app
    """
    config = config or _get_config()
    region_client = region_client or RegionClient(
        provinces_url=config.provinces_url,
        wards_url=config.wards_url,
        timeout=config.request_timeout_seconds,
    )
    profile_store = profile_store or _build_profile_store(config)
    post_repository = post_repository or YamlPostRepository(config.posts_path)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        synchronizer = PreferenceSynchronizer(
            profile_store,
            default_radius_km=config.default_radius_km,
        )
        coordinator = RegionSelectionCoordinator(
            region_client,
            synchronizer,
            default_radius_km=config.default_radius_km,
        )
        await coordinator.start()
        logger.info(
            "Selection session ready: %d provinces, province=%s",
            len(coordinator.provinces),
            coordinator.state.selected_province_code,
        )

        app.state.coordinator = coordinator
        app.state.synchronizer = synchronizer
        yield

    app = FastAPI(
        title="Relief Posts API",
        description="Disaster-relief requests filtered by distance and region",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.region_client = region_client
    app.state.post_repository = post_repository

    _register_routes(app)
    return app


# ===== Helper Functions =====

def _region_to_dict(region: Region) -> dict[str, Any]:
    """Convert Region to dict."""
    result = {"code": region.code, "name": region.name}
    if region.is_ward:
        result["province_code"] = region.parent_code
    return result


def _post_to_dict(post: RelievePost, origin: Coordinate | None = None) -> dict[str, Any]:
    """Convert RelievePost to API response format."""
    result = {
        "id": post.id,
        "title": post.title,
        "description": post.description,
        "location": {
            "latitude": post.location.coordinate.latitude,
            "longitude": post.location.coordinate.longitude,
            "address": post.location.address,
        },
        "urgency": post.urgency.value,
        "status": post.status.value if post.status else None,
        "posted_at": post.posted_at.isoformat() if post.posted_at else None,
        "contact_phone": post.contact_phone,
        "contact_name": post.contact_name,
        "needs": list(post.needs),
    }
    if origin is not None:
        result["distance_km"] = round(distance_km(origin, post.location.coordinate), 2)
    return result


def _selection_response(coordinator: RegionSelectionCoordinator) -> dict[str, Any]:
    """Build selection info for response."""
    state = coordinator.state
    snapshot = coordinator.snapshot()
    return {
        "province_code": state.selected_province_code,
        "province_name": snapshot.province_name,
        "ward_code": state.selected_ward_code,
        "ward_name": snapshot.ward_name,
        "radius_km": coordinator.radius_km,
        "loading_wards": state.loading_wards,
        "ward_options": [_region_to_dict(w) for w in state.ward_options],
    }


def _live_location(lat: float | None, lng: float | None) -> Coordinate | None:
    """Build a live coordinate from query params; both are required."""
    if lat is None or lng is None:
        return None

    errors = validate_coordinates(lat, lng, "location")
    if errors:
        raise HTTPException(status_code=422, detail=[e.message for e in errors])
    return Coordinate(lat, lng)


# ===== Endpoints =====

def _register_routes(app: FastAPI) -> None:
    """Attach all endpoints to the app."""

    @app.get("/health")
    async def health_check():
        """Health check endpoint for Cloud Run."""
        return {"status": "healthy"}

    @app.get("/api/provinces")
    async def get_provinces():
        """List provinces for the province selector."""
        provinces = app.state.coordinator.provinces
        return {
            "provinces": [_region_to_dict(p) for p in provinces],
            "count": len(provinces),
        }

    @app.get("/api/wards")
    async def get_wards(province: str = Query(default="")):
        """List wards of a province (empty on lookup failure)."""
        wards = await asyncio.to_thread(app.state.region_client.fetch_wards, province)
        return {
            "province_code": province,
            "wards": [_region_to_dict(w) for w in wards],
            "count": len(wards),
        }

    @app.get("/api/radius-options")
    async def get_radius_options():
        """List radius choices; 0 means show everything."""
        config = app.state.config
        return {
            "options_km": list(config.radius_options_km),
            "default_km": config.default_radius_km,
        }

    @app.get("/api/selection")
    async def get_selection():
        """Current province/ward/radius selection."""
        return _selection_response(app.state.coordinator)

    @app.put("/api/selection")
    async def update_selection(update: SelectionUpdate):
        """Change the selection: province first, then ward, then radius."""
        coordinator: RegionSelectionCoordinator = app.state.coordinator
        fields = update.model_fields_set

        if "province_code" in fields:
            if not await coordinator.select_province(update.province_code):
                raise HTTPException(
                    status_code=409,
                    detail="Province selection superseded by a newer request",
                )
        if "ward_code" in fields:
            if not await coordinator.select_ward(update.ward_code):
                state = coordinator.state
                if state.loading_wards:
                    raise HTTPException(
                        status_code=409,
                        detail="Wards are still loading",
                    )
                raise HTTPException(
                    status_code=422,
                    detail=(
                        f"Ward '{update.ward_code}' is not in province "
                        f"'{state.selected_province_code}'"
                    ),
                )
        if "radius_km" in fields and update.radius_km is not None:
            await coordinator.set_radius(update.radius_km)

        return _selection_response(coordinator)

    @app.post("/api/selection/clear")
    async def clear_selection():
        """Reset province and ward, restore the default radius."""
        coordinator: RegionSelectionCoordinator = app.state.coordinator
        await coordinator.clear_filters()
        return _selection_response(coordinator)

    @app.get("/api/posts")
    async def get_posts(
        lat: float | None = Query(default=None),
        lng: float | None = Query(default=None),
    ):
        """List posts relevant to the current selection.

        A live lat/lng pair overrides the location saved in the profile.
        Without any location only the province/ward filter applies.
        """
        coordinator: RegionSelectionCoordinator = app.state.coordinator
        spec = coordinator.filter_spec(_live_location(lat, lng))
        posts = filter_posts(
            await asyncio.to_thread(app.state.post_repository.get_all),
            spec,
        )

        return {
            "filter": {
                "province_name": spec.province_name,
                "ward_name": spec.ward_name,
                "radius_km": spec.radius_km,
                "has_location": spec.user_location is not None,
                "distance_active": spec.distance_active,
            },
            "posts": [_post_to_dict(p, spec.user_location) for p in posts],
            "count": len(posts),
        }

    @app.get("/api/posts/{post_id}")
    async def get_post(post_id: str):
        """Get a single post by ID."""
        post = await asyncio.to_thread(app.state.post_repository.get_by_id, post_id)
        if post is None:
            raise HTTPException(status_code=404, detail=f"Post '{post_id}' not found")
        return _post_to_dict(post)

    @app.put("/api/profile/location")
    async def update_location(location: LocationUpdate):
        """Save a geolocation reading to the profile."""
        coordinate = _live_location(location.latitude, location.longitude)
        saved = await asyncio.to_thread(app.state.synchronizer.update_location, coordinate)
        if not saved:
            raise HTTPException(status_code=500, detail="Failed to save location")
        return {
            "latitude": coordinate.latitude,
            "longitude": coordinate.longitude,
        }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=int(os.environ.get("PORT", "8080")),
    )
