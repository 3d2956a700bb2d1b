"""Tests for API Routes."""

from collections.abc import Generator
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from gradermarket.config import Settings, get_settings
from gradermarket.domains.catalog import Equipment, Part, StockCountry
from gradermarket.domains.search import CatalogSearchEngine

from .deps import get_catalog_repository, get_search_engine
from .main import create_app
from .rate_limit import RateLimiter

CATALOG = [
    Equipment(
        id="g1",
        title="Caterpillar 140M Motor Grader",
        brand="Cat",
        model="140M",
        price=185000,
        stock_country=StockCountry.EU,
    ),
    Part(
        id="p1",
        title="Cutting Edge <HD>",
        brand="Cat",
        part_number="1R-0742",
        compatible_models=["140M"],
        price=420,
        stock_quantity=15,
        stock_country=StockCountry.EU,
    ),
    Part(
        id="p2",
        title="Hydraulic Filter",
        brand="Komatsu",
        part_number="20Y-70-11100",
        category="Filters",
        price=95,
        stock_quantity=0,
        stock_country=StockCountry.KENYA,
        is_sold=True,
    ),
]


@pytest.fixture
def mock_catalog_repo() -> AsyncMock:
    """Create a mock catalog repository."""
    mock = AsyncMock()
    mock.list_items.return_value = list(CATALOG)
    mock.get_item.return_value = None
    return mock


@pytest.fixture
def client(mock_catalog_repo: AsyncMock) -> Generator[TestClient, None, None]:
    """Create a test client with mocked dependencies."""
    app = create_app()

    # Override dependencies with mocks
    app.dependency_overrides[get_catalog_repository] = lambda: mock_catalog_repo
    app.dependency_overrides[get_search_engine] = lambda: CatalogSearchEngine()
    app.dependency_overrides[get_settings] = lambda: Settings(search_max_query_length=20)

    yield TestClient(app)

    # Cleanup
    app.dependency_overrides.clear()


def test_health_endpoint(client: TestClient) -> None:
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200

    data = response.json()
    assert data["status"] == "healthy"
    assert "service" in data


def test_search_part_number(client: TestClient) -> None:
    """Test part-number search returns the exact part."""
    response = client.get("/api/search", params={"q": "1r0742", "mode": "partNumber"})

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 1
    hit = data["results"][0]
    assert hit["kind"] == "Part"
    assert hit["id"] == "p1"
    assert hit["rank"] == 1
    assert hit["part_number"] == "1R-0742"
    assert hit["detail_path"] == "/part/p1"


def test_search_highlights_and_escapes(client: TestClient) -> None:
    """Test titles are HTML-escaped with matches marked."""
    response = client.get("/api/search", params={"q": "edge", "mode": "description"})
    assert response.json()["results"] == []

    response = client.get("/api/search", params={"q": "cutting"})
    hit = response.json()["results"][0]
    assert hit["title_highlighted"] == "<mark>Cutting</mark> Edge &lt;HD&gt;"


def test_search_facets(client: TestClient) -> None:
    """Test repeatable facet parameters."""
    response = client.get(
        "/api/search",
        params={"q": "140m", "mode": "model", "stock": "out", "brand": ["Cat"]},
    )
    data = response.json()
    assert [r["id"] for r in data["results"]] == ["g1"]
    assert data["results"][0]["model"] == "140M"


def test_search_blank_query(client: TestClient) -> None:
    """Test blank text returns an empty list, not an error."""
    response = client.get("/api/search", params={"q": "  "})
    assert response.status_code == 200
    assert response.json()["total"] == 0


def test_search_invalid_mode(client: TestClient) -> None:
    """Test unknown modes fail validation."""
    response = client.get("/api/search", params={"q": "x", "mode": "serial"})
    assert response.status_code == 422


def test_search_query_too_long(client: TestClient) -> None:
    """Test oversize queries map to SEARCH_INVALID_QUERY."""
    response = client.get("/api/search", params={"q": "x" * 21})
    assert response.status_code == 400
    data = response.json()
    assert data["error"]["code"] == "SEARCH_INVALID_QUERY"
    assert "request_id" in data


def test_catalog_list_filters(client: TestClient, mock_catalog_repo: AsyncMock) -> None:
    """Test catalog browsing applies page filters."""
    response = client.get("/api/catalog", params={"status": "sold"})
    data = response.json()
    assert data["total"] == 1
    assert data["items"][0]["id"] == "p2"

    response = client.get("/api/catalog", params={"max_price": "500", "country": "EU"})
    assert [i["id"] for i in response.json()["items"]] == ["p1"]


def test_catalog_text_filter(client: TestClient) -> None:
    """Test catalog browsing with a separator-tolerant model query."""
    response = client.get("/api/catalog", params={"q": "140-m", "mode": "model"})
    assert response.status_code == 200
    assert [i["id"] for i in response.json()["items"]] == ["g1", "p1"]

    response = client.get("/api/catalog", params={"q": "20y70", "mode": "partNumber"})
    assert [i["id"] for i in response.json()["items"]] == ["p2"]


def test_catalog_text_filter_too_long(client: TestClient) -> None:
    """Test oversize catalog queries are rejected."""
    response = client.get("/api/catalog", params={"q": "x" * 21})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "SEARCH_INVALID_QUERY"


def test_catalog_facets(client: TestClient, mock_catalog_repo: AsyncMock) -> None:
    """Test facet options come from the snapshot."""
    mock_catalog_repo.facet_values.return_value = {"brands": ["Cat"], "countries": ["EU"]}

    response = client.get("/api/catalog/facets")
    assert response.status_code == 200
    assert response.json() == {"brands": ["Cat"], "countries": ["EU"]}


def test_catalog_get_listing(client: TestClient, mock_catalog_repo: AsyncMock) -> None:
    """Test detail lookup by kind and id."""
    mock_catalog_repo.get_item.return_value = CATALOG[0]

    response = client.get("/api/catalog/Equipment/g1")
    assert response.status_code == 200
    data = response.json()
    assert data["kind"] == "Equipment"
    assert data["detail_path"] == "/grader/g1"


def test_catalog_listing_not_found(client: TestClient) -> None:
    """Test unknown listings return NOT_FOUND."""
    response = client.get("/api/catalog/Part/missing")
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"


def test_request_id_and_latency_headers(client: TestClient) -> None:
    """Test tracing headers are attached."""
    response = client.get("/api", headers={"X-Request-ID": "abc-123"})
    assert response.headers["X-Request-ID"] == "abc-123"
    assert "X-Response-Time-Ms" in response.headers


def test_rate_limit(mock_catalog_repo: AsyncMock) -> None:
    """Test requests beyond the limit get 429 until the window resets."""
    now = {"t": 0.0}
    app = create_app(limiter=RateLimiter(max_requests=2, window_seconds=60, clock=lambda: now["t"]))
    app.dependency_overrides[get_catalog_repository] = lambda: mock_catalog_repo
    client = TestClient(app)

    assert client.get("/api").status_code == 200
    assert client.get("/api").status_code == 200
    limited = client.get("/api")
    assert limited.status_code == 429
    assert limited.json()["error"]["code"] == "SECURITY_RATE_LIMITED"
    assert limited.headers["Retry-After"] == "60"

    # Health checks are never limited
    assert client.get("/health").status_code == 200

    now["t"] = 61.0
    assert client.get("/api").status_code == 200
