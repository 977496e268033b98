"""HTTP surface tests using FastAPI's TestClient."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from storytime_providers import (
    ImageProvider,
    ImageRequest,
    ImageResponse,
    MockImageProvider,
    MockProvider,
    MockSpeechProvider,
    RetryPolicy,
    UpstreamError,
)

import apps.api.app.main as api_main
from apps.api.app.main import app, get_orchestrator, get_store
from services.orchestrator.app.cache import AudioCache
from services.orchestrator.app.flows import StoryOrchestrator, run_story_flow
from services.orchestrator.app.illustration import IllustrationGenerator
from services.orchestrator.app.narration import NarrationGenerator
from services.orchestrator.app.storage import InMemoryStoryStore
from services.orchestrator.app.story import StoryTextGenerator


async def _no_sleep(delay: float) -> None:
    return None


NO_WAIT = RetryPolicy(sleep=_no_sleep)

PROFILE = {
    "name": "Ada",
    "gender": "Girl",
    "age": 6,
    "hairColor": "Brown",
    "hairType": "Curly",
    "skinTone": "Medium",
}


class _BrokenImageProvider(ImageProvider):
    name = "broken"

    async def generate_image(self, request: ImageRequest) -> ImageResponse:
        raise UpstreamError("upstream said no: secret detail")


def _orchestrator(store: InMemoryStoryStore, audio_dir: Path, image_provider: ImageProvider) -> StoryOrchestrator:
    return StoryOrchestrator(
        store,
        StoryTextGenerator(MockProvider(), NO_WAIT),
        IllustrationGenerator(image_provider, NO_WAIT),
        NarrationGenerator(MockSpeechProvider(), AudioCache(audio_dir), NO_WAIT),
    )


@pytest.fixture
def store() -> InMemoryStoryStore:
    return InMemoryStoryStore()


@pytest.fixture
def client(store: InMemoryStoryStore, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    orchestrator = _orchestrator(store, tmp_path / "audio", MockImageProvider())
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_orchestrator] = lambda: orchestrator
    monkeypatch.setattr(api_main, "run_story_flow", run_story_flow.fn)
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def _create_profile(client: TestClient, **overrides) -> dict:
    response = client.post("/api/profiles", json={**PROFILE, **overrides})
    assert response.status_code == 201, response.text
    return response.json()


def _generate(client: TestClient, profile_id: int, **overrides) -> dict:
    payload = {
        "userProfileId": profile_id,
        "character": "dragon",
        "environment": "forest",
        "theme": "kindness",
        "wordCount": 100,
        "ttsVoice": "en-US-Standard-A",
        **overrides,
    }
    return client.post("/api/stories/generate", json=payload)


def test_health(client: TestClient) -> None:
    assert client.get("/health").json() == {"status": "ok"}


def test_metrics_endpoint(client: TestClient) -> None:
    client.get("/health")
    response = client.get("/metrics")
    assert response.status_code == 200
    assert "storytime_http_requests_total" in response.text


def test_profile_crud(client: TestClient) -> None:
    created = _create_profile(client)
    assert created["id"] == 1
    assert created["hairColor"] == "Brown"
    assert "creationDate" in created

    assert client.get("/api/profiles/1").json()["name"] == "Ada"
    assert len(client.get("/api/profiles").json()) == 1

    assert client.delete("/api/profiles/1").status_code == 204
    missing = client.get("/api/profiles/1")
    assert missing.status_code == 404
    assert missing.json() == {"message": "Profile not found"}
    assert client.delete("/api/profiles/1").status_code == 404


def test_profile_validation_errors(client: TestClient) -> None:
    response = client.post("/api/profiles", json={**PROFILE, "age": 2})
    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Validation error"
    assert body["errors"]

    blank = client.post("/api/profiles", json={**PROFILE, "skinTone": "  "})
    assert blank.status_code == 400


def test_sixth_profile_rejected(client: TestClient) -> None:
    for index in range(5):
        _create_profile(client, name=f"Child {index}")
    response = client.post("/api/profiles", json=PROFILE)
    assert response.status_code == 400
    assert response.json() == {"message": "Maximum of 5 profiles allowed"}


def test_generate_story_returns_complete_story(client: TestClient) -> None:
    profile = _create_profile(client)

    response = _generate(client, profile["id"])

    assert response.status_code == 201, response.text
    story = response.json()
    assert story["status"] == "complete"
    assert story["requestedWordCount"] == 100
    assert story["userProfile"]["id"] == profile["id"]
    assert [page["pageNumber"] for page in story["pages"]] == [1, 2]
    assert all(page["imageUrl"] and page["audioUrl"].startswith("/audio/") for page in story["pages"])

    fetched = client.get(f"/api/stories/{story['id']}").json()
    assert fetched["pages"] == story["pages"]
    listed = client.get("/api/stories", params={"userProfileId": profile["id"]}).json()
    assert [item["id"] for item in listed] == [story["id"]]
    assert client.get("/api/stories", params={"userProfileId": 99}).json() == []


def test_generate_validation_and_missing_profile(client: TestClient) -> None:
    assert _generate(client, 1, wordCount=50).status_code == 400
    assert _generate(client, 1, ttsVoice=" ").status_code == 400

    missing = _generate(client, 42)
    assert missing.status_code == 404
    assert missing.json() == {"message": "User profile not found"}


def test_generate_upstream_failure_is_generic_500(
    client: TestClient, store: InMemoryStoryStore, tmp_path: Path
) -> None:
    app.dependency_overrides[get_orchestrator] = lambda: _orchestrator(store, tmp_path, _BrokenImageProvider())
    profile = _create_profile(client)

    response = _generate(client, profile["id"])

    assert response.status_code == 500
    assert response.json() == {"message": "Internal server error"}
    stories = client.get("/api/stories").json()
    assert stories[0]["status"] == "failed"


def test_story_not_found(client: TestClient) -> None:
    response = client.get("/api/stories/7")
    assert response.status_code == 404
    assert response.json() == {"message": "Story not found"}


def test_favorites_flow(client: TestClient) -> None:
    profile = _create_profile(client)
    story = _generate(client, profile["id"]).json()
    payload = {
        "storyId": story["id"],
        "userProfileId": profile["id"],
        "character": "dragon",
        "environment": "forest",
        "theme": "kindness",
    }

    created = client.post("/api/favorites", json=payload)
    assert created.status_code == 201
    favorite = created.json()
    assert favorite["firstPageThumbnail"] == story["pages"][0]["imageUrl"]

    listed = client.get("/api/favorites", params={"userProfileId": profile["id"]}).json()
    assert listed[0]["story"]["id"] == story["id"]
    assert len(listed[0]["story"]["pages"]) == 2

    assert client.delete(f"/api/favorites/{favorite['id']}").status_code == 204
    gone = client.delete(f"/api/favorites/{favorite['id']}")
    assert gone.status_code == 404
    assert gone.json() == {"message": "Favorite story not found"}


def test_favorite_limits_and_missing_story(client: TestClient) -> None:
    profile = _create_profile(client)
    story = _generate(client, profile["id"]).json()
    payload = {
        "storyId": story["id"],
        "userProfileId": profile["id"],
        "character": "dragon",
        "environment": "forest",
        "theme": "kindness",
    }

    missing = client.post("/api/favorites", json={**payload, "storyId": 999})
    assert missing.status_code == 404
    assert missing.json() == {"message": "Story not found"}

    for _ in range(5):
        assert client.post("/api/favorites", json=payload).status_code == 201
    sixth = client.post("/api/favorites", json=payload)
    assert sixth.status_code == 400
    assert sixth.json() == {"message": "Maximum of 5 favorite stories allowed per user"}
    listed = client.get("/api/favorites", params={"userProfileId": profile["id"]}).json()
    assert len(listed) == 5


def test_misconfigured_provider_is_generic_500(
    client: TestClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    app.dependency_overrides.pop(get_orchestrator)
    monkeypatch.setattr(api_main, "_ORCHESTRATOR", None)
    monkeypatch.setenv("LLM_PROVIDER", "openai")
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("OPENAI_MODEL", raising=False)
    profile = _create_profile(client)

    response = _generate(client, profile["id"])

    assert response.status_code == 500
    assert response.json() == {"message": "Internal server error"}
    assert client.get("/api/stories").json() == []
