"""API tests for the recipe extractor application."""
import uuid
import pytest
from fastapi.testclient import TestClient

from recipe_extractor.core.exceptions import ExtractionError
from recipe_extractor.main import app
from recipe_extractor.models.recipe import Recipe
from recipe_extractor.models.responses import CacheStats, RecentRecipe
from recipe_extractor.services import CacheService, LocalMedia, MediaFetcher, RecentLedger, RecipeService
from recipe_extractor.services.media_fetcher import AcquisitionStrategy
from recipe_extractor.services.recent_ledger import load_seed_entries


class FakeStrategy(AcquisitionStrategy):
    name = "fake"

    def __init__(self, temp_dir):
        self.temp_dir = temp_dir

    async def acquire(self, url, logger):
        media_id = uuid.uuid4().hex
        path = self.temp_dir / f"{media_id}.mp4"
        path.write_bytes(b"video")
        return LocalMedia(media_id=media_id, path=path, source=self.name)


class FakeExtractor:
    configured = True

    def __init__(self):
        self.calls = 0
        self.error = None

    async def extract(self, media, request_id=None):
        self.calls += 1
        if self.error:
            raise self.error
        return Recipe(
            title="Lemon Risotto",
            description="Creamy risotto with lemon zest.",
            ingredients=[{"item": "arborio rice", "amount": "1", "unit": "cup"}],
            instructions=[{"step": 1, "instruction": "Toast the rice."}]
        )


@pytest.fixture
def extractor():
    return FakeExtractor()


@pytest.fixture
def client(tmp_path, extractor):
    """Test client with a service wired to fakes."""
    service = RecipeService(
        fetcher=MediaFetcher([FakeStrategy(tmp_path)]),
        extractor=extractor,
        cache=CacheService(),
        ledger=RecentLedger(seeds=load_seed_entries()),
        cache_enabled=True,
        sweep_interval_seconds=0
    )
    with TestClient(app) as test_client:
        app.state.recipe_service = service
        yield test_client


def test_health_endpoint(client):
    """Test health check endpoint."""
    response = client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["dependencies"]["gemini"] == "healthy"
    assert data["dependencies"]["yt_dlp"] in ("healthy", "not_installed")
    assert "metrics" in data


def test_supported_platforms_endpoint(client):
    """Test supported platforms endpoint."""
    response = client.get("/api/supported-platforms")
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    names = [platform["name"] for platform in data["data"]["platforms"]]
    assert names == ["tiktok", "youtube_shorts", "instagram"]


def test_recent_starts_with_examples(client):
    response = client.get("/api/recent")
    assert response.status_code == 200
    recipes = response.json()["recipes"]
    assert recipes
    assert all(recipe["is_example"] for recipe in recipes)
    assert set(recipes[0]) == set(RecentRecipe.model_fields)


def test_extract_missing_url(client, extractor):
    response = client.post("/api/extract", json={})
    assert response.status_code == 400
    data = response.json()
    assert data["success"] is False
    assert data["error"] == "Please provide a video URL"
    assert extractor.calls == 0


def test_extract_malformed_body(client):
    response = client.post("/api/extract", content="not json", headers={"Content-Type": "application/json"})
    assert response.status_code == 400
    assert response.json()["error"] == "Please provide a video URL"


def test_extract_unsupported_platform(client, extractor):
    response = client.post("/api/extract", json={"url": "https://example.com/video"})
    assert response.status_code == 400
    data = response.json()
    assert data["code"] == "UNSUPPORTED_PLATFORM"
    assert "Unsupported platform" in data["error"]
    assert extractor.calls == 0


def test_extract_then_cached(client, extractor, tmp_path):
    url = "https://www.tiktok.com/@x/video/123?lang=en"

    first = client.post("/api/extract", json={"url": url})
    second = client.post("/api/extract", json={"url": url})

    assert first.status_code == 200
    assert first.json()["success"] is True
    assert first.json()["cached"] is False
    assert second.json()["cached"] is True
    assert second.json()["recipe"] == first.json()["recipe"]
    assert extractor.calls == 1
    assert list(tmp_path.iterdir()) == []

    recipes = client.get("/api/recent").json()["recipes"]
    assert recipes[0]["url"] == url
    assert recipes[0]["title"] == "Lemon Risotto"
    assert recipes[0]["is_example"] is False


def test_extract_failure(client, extractor):
    extractor.error = ExtractionError("Failed to extract recipe: quota exceeded")

    response = client.post("/api/extract", json={"url": "https://youtu.be/abc"})

    assert response.status_code == 500
    data = response.json()
    assert data["code"] == "EXTRACTION_FAILED"
    assert data["request_id"].startswith("req_")


def test_cache_stats_endpoint(client):
    client.post("/api/extract", json={"url": "https://youtu.be/abc"})

    response = client.get("/api/cache/stats")
    assert response.status_code == 200
    stats = response.json()["data"]
    assert stats["enabled"] is True
    assert stats["total_entries"] == 1
    assert stats["max_entries"] == 50
    assert set(stats) == set(CacheStats.model_fields)
