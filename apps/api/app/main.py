"""Profiles, story generation and favorites API for the Storytime stack."""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Optional

from fastapi import Depends, FastAPI, Query, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import ValidationError

from storytime_observability import log_context, setup_fastapi_metrics, setup_logging
from storytime_schemas import (
    CompleteFavorite,
    CompleteStory,
    FavoriteStory,
    FavoriteStoryCreate,
    Story,
    StoryGenerationRequest,
    UserProfile,
    UserProfileCreate,
)

from services.orchestrator.app.errors import LimitExceededError, NotFoundError
from services.orchestrator.app.flows import StoryOrchestrator, run_story_flow
from services.orchestrator.app.providers import build_orchestrator, resolve_audio_dir
from services.orchestrator.app.storage import InMemoryStoryStore, StoryStore

MAX_PROFILES = 5
MAX_FAVORITES_PER_PROFILE = 5

ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv("STORYTIME_ALLOWED_ORIGINS", "http://localhost:5173").split(",")
    if origin.strip()
]

AUDIO_DIR: Path = resolve_audio_dir()

SERVICE_NAME = "api"
setup_logging(SERVICE_NAME)
logger = logging.getLogger(__name__)

_STORE: StoryStore = InMemoryStoryStore()
_ORCHESTRATOR: Optional[StoryOrchestrator] = None


def get_store() -> StoryStore:
    return _STORE


def get_orchestrator(store: StoryStore = Depends(get_store)) -> StoryOrchestrator:
    """Pipeline bound to the active store, built on first use."""

    global _ORCHESTRATOR
    if _ORCHESTRATOR is None or _ORCHESTRATOR.store is not store:
        _ORCHESTRATOR = build_orchestrator(store, AUDIO_DIR)
    return _ORCHESTRATOR


app = FastAPI(title="Storytime API", version="0.1.0")
setup_fastapi_metrics(app, service_name=SERVICE_NAME)
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.mount("/audio", StaticFiles(directory=str(AUDIO_DIR), check_dir=False), name="audio")


def _error_details(errors: list[dict[str, Any]]) -> list[dict[str, Any]]:
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", ""), "type": error.get("type", "")}
        for error in errors
    ]


@app.exception_handler(RequestValidationError)
async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "Validation error", "errors": _error_details(list(exc.errors()))},
    )


@app.exception_handler(NotFoundError)
async def _not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"message": f"{exc.entity} not found"})


@app.exception_handler(LimitExceededError)
async def _limit_handler(request: Request, exc: LimitExceededError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"message": str(exc)})


@app.exception_handler(Exception)
async def _unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "Unhandled error while serving request",
        extra={"route": request.url.path, "method": request.method},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal server error"},
    )


@app.get("/health", tags=["health"])
def health() -> dict[str, str]:
    """Simple readiness check."""

    return {"status": "ok"}


# Profiles


@app.get("/api/profiles", response_model=list[UserProfile], tags=["profiles"])
async def list_profiles(store: StoryStore = Depends(get_store)) -> list[UserProfile]:
    return await store.list_profiles()


@app.get("/api/profiles/{profile_id}", response_model=UserProfile, tags=["profiles"])
async def get_profile(profile_id: int, store: StoryStore = Depends(get_store)) -> UserProfile:
    profile = await store.get_profile(profile_id)
    if profile is None:
        raise NotFoundError("Profile", profile_id)
    return profile


@app.post(
    "/api/profiles",
    response_model=UserProfile,
    status_code=status.HTTP_201_CREATED,
    tags=["profiles"],
)
async def create_profile(request: Request, store: StoryStore = Depends(get_store)) -> UserProfile:
    # The cap is enforced before the body is validated.
    if len(await store.list_profiles()) >= MAX_PROFILES:
        raise LimitExceededError(f"Maximum of {MAX_PROFILES} profiles allowed")
    try:
        body = await request.json()
    except ValueError as exc:
        raise RequestValidationError(
            [{"loc": ("body",), "msg": "Request body is not valid JSON", "type": "json_invalid"}]
        ) from exc
    try:
        payload = UserProfileCreate.model_validate(body)
    except ValidationError as exc:
        raise RequestValidationError(exc.errors()) from exc
    profile = await store.create_profile(payload)
    logger.info("Profile created", extra={"profile_id": profile.id})
    return profile


@app.delete("/api/profiles/{profile_id}", status_code=status.HTTP_204_NO_CONTENT, tags=["profiles"])
async def delete_profile(profile_id: int, store: StoryStore = Depends(get_store)) -> Response:
    if not await store.delete_profile(profile_id):
        raise NotFoundError("Profile", profile_id)
    logger.info("Profile deleted", extra={"profile_id": profile_id})
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Stories


@app.get("/api/stories", response_model=list[Story], tags=["stories"])
async def list_stories(
    user_profile_id: Optional[int] = Query(None, alias="userProfileId"),
    store: StoryStore = Depends(get_store),
) -> list[Story]:
    return await store.list_stories(user_profile_id)


@app.get("/api/stories/{story_id}", response_model=CompleteStory, tags=["stories"])
async def get_story(story_id: int, store: StoryStore = Depends(get_store)) -> CompleteStory:
    story = await store.get_complete_story(story_id)
    if story is None:
        raise NotFoundError("Story", story_id)
    return story


@app.post(
    "/api/stories/generate",
    response_model=CompleteStory,
    status_code=status.HTTP_201_CREATED,
    tags=["stories"],
)
async def generate_story(
    payload: StoryGenerationRequest,
    orchestrator: StoryOrchestrator = Depends(get_orchestrator),
) -> CompleteStory:
    with log_context(profile_id=payload.user_profile_id):
        logger.info(
            "Story generation requested",
            extra={"word_count": payload.word_count, "language": payload.language.value},
        )
        return await run_story_flow(payload, orchestrator)


# Favorites


@app.get("/api/favorites", response_model=list[CompleteFavorite], tags=["favorites"])
async def list_favorites(
    user_profile_id: Optional[int] = Query(None, alias="userProfileId"),
    store: StoryStore = Depends(get_store),
) -> list[CompleteFavorite]:
    return await store.list_complete_favorites(user_profile_id)


@app.post(
    "/api/favorites",
    response_model=FavoriteStory,
    status_code=status.HTTP_201_CREATED,
    tags=["favorites"],
)
async def create_favorite(
    payload: FavoriteStoryCreate,
    store: StoryStore = Depends(get_store),
) -> FavoriteStory:
    if len(await store.list_favorites(payload.user_profile_id)) >= MAX_FAVORITES_PER_PROFILE:
        raise LimitExceededError(
            f"Maximum of {MAX_FAVORITES_PER_PROFILE} favorite stories allowed per user"
        )
    story = await store.get_complete_story(payload.story_id)
    if story is None:
        raise NotFoundError("Story", payload.story_id)

    first_page = next((page for page in story.pages if page.page_number == 1), None)
    favorite = await store.create_favorite(
        payload,
        first_page_thumbnail=first_page.image_url if first_page else None,
    )
    logger.info("Favorite created", extra={"profile_id": payload.user_profile_id, "story_id": payload.story_id})
    return favorite


@app.delete("/api/favorites/{favorite_id}", status_code=status.HTTP_204_NO_CONTENT, tags=["favorites"])
async def delete_favorite(favorite_id: int, store: StoryStore = Depends(get_store)) -> Response:
    favorite = await store.get_favorite(favorite_id)
    if favorite is None:
        raise NotFoundError("Favorite story", favorite_id)
    await store.delete_favorite(favorite_id)
    logger.info("Favorite deleted", extra={"profile_id": favorite.user_profile_id, "favorite_id": favorite_id})
    return Response(status_code=status.HTTP_204_NO_CONTENT)
