"""Tests for web routes and the JSON API."""

import pytest
from starlette.testclient import TestClient

from ai_tools_directory import ads
from ai_tools_directory import web
from ai_tools_directory.catalog import Catalog
from ai_tools_directory.web import app
from ai_tools_directory.web import get_canonical_url
from ai_tools_directory.web import url


@pytest.fixture
def client(cms, monkeypatch):
    """Test client with the catalog pointed at the fake CMS."""
    monkeypatch.setattr(web, "catalog", Catalog(cms.source()))
    return TestClient(app, raise_server_exceptions=False)


class TestHelpers:
    def test_canonical_url_root(self):
        assert get_canonical_url() == web.SITE_URL
        assert get_canonical_url("/") == web.SITE_URL

    def test_canonical_url_with_path(self):
        assert get_canonical_url("/tool/sora") == f"{web.SITE_URL}/tool/sora"

    def test_url_prefixes_base_path(self, monkeypatch):
        monkeypatch.setattr(web, "BASE_PATH", "/aitools")
        assert url("tools") == "/aitools/tools"
        assert url("/tools") == "/aitools/tools"


class TestApi:
    def test_tools_page(self, client):
        response = client.get("/api/tools", params={"first": 2})
        assert response.status_code == 200
        body = response.json()
        assert body["pageInfo"] == {"hasNextPage": True, "endCursor": "cursor-2"}
        assert [e["node"]["slug"] for e in body["edges"]] == ["video-tool-1", "video-tool-2"]
        assert body["edges"][0]["node"]["aiToolCategories"]["nodes"][0]["slug"] == "video"

    def test_tools_category_filter_matches_slug_or_name(self, client):
        response = client.get("/api/tools", params={"first": 20, "category": "Data-Analysis"})
        assert [e["node"]["slug"] for e in response.json()["edges"]] == ["pandas-ai", "chart-wizard"]

    def test_tools_cursor_continues(self, client):
        response = client.get("/api/tools", params={"first": 5, "after": "cursor-5"})
        assert [e["node"]["slug"] for e in response.json()["edges"]] == ["pandas-ai", "chart-wizard", "uncategorized"]
        assert response.json()["pageInfo"]["hasNextPage"] is False

    def test_upstream_failure_returns_error_body(self, client, cms):
        cms.status_code = 500
        response = client.get("/api/tools")
        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "Failed to fetch AI Tools"
        assert "500" in body["details"]

    def test_category_found_and_missing(self, client):
        assert client.get("/api/categories/video").json()["name"] == "Video"
        response = client.get("/api/categories/nope")
        assert response.status_code == 404
        assert response.json()["error"] == "Category not found"

    def test_categories(self, client):
        assert [c["slug"] for c in client.get("/api/categories").json()["nodes"]] == ["video", "data-analysis"]

    def test_category_tools_requires_category(self, client):
        response = client.get("/api/category-tools")
        assert response.status_code == 400
        assert response.json()["error"] == "Category is required"

    def test_category_tools(self, client):
        response = client.get("/api/category-tools", params={"category": "data-analysis"})
        assert [e["node"]["slug"] for e in response.json()["edges"]] == ["pandas-ai"]

    def test_tool_stats(self, client):
        assert client.get("/api/tool-stats").json() == {"toolCount": 8, "categoryCount": 2}

    def test_tool_detail_and_missing(self, client):
        assert client.get("/api/tools/pandas-ai").json()["title"] == "Pandas AI"
        assert client.get("/api/tools/nope").status_code == 404

    def test_search(self, client):
        results = client.get("/api/search", params={"q": "chart"}).json()
        assert [r["slug"] for r in results] == ["chart-wizard"]
        assert client.get("/api/search", params={"q": "ch"}).json() == []


class TestPages:
    def test_health_endpoint(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_homepage(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert "Discover AI Tools" in response.text
        assert "Latest AI Tools" in response.text
        assert "8 AI tools" in response.text
        assert 'rel="canonical"' in response.text
        assert '"@type": "WebSite"' in response.text

    def test_homepage_survives_cms_outage(self, client, cms):
        cms.status_code = 502
        response = client.get("/")
        assert response.status_code == 200
        assert "Error Loading AI Tools" in response.text
        assert "N/A AI tools" in response.text

    def test_tools_page_lists_every_tool_on_one_page(self, client):
        response = client.get("/tools")
        assert response.status_code == 200
        assert "Video Tool 1" in response.text
        assert "Load More" not in response.text

    def test_category_page_lists_matching_tools(self, client):
        response = client.get("/category/data-analysis")
        assert response.status_code == 200
        assert "Data Analysis AI Tools" in response.text
        assert "Pandas AI" in response.text
        assert "Chart Wizard" in response.text
        assert "Video Tool 1" not in response.text

    def test_category_page_without_matches_shows_empty_state(self, client):
        response = client.get("/category/music")
        assert response.status_code == 200
        assert "No AI Tools Found" in response.text
        assert "/submit" not in response.text

    def test_listing_error_shows_retry(self, client, cms):
        cms.status_code = 500
        response = client.get("/category/video")
        assert response.status_code == 200
        assert "Error Loading AI Tools" in response.text
        assert "Try again" in response.text
        assert 'href="/category/video"' in response.text

    def test_load_more_partial(self, client, monkeypatch):
        monkeypatch.setattr(web, "PAGE_SIZE", 2)
        response = client.get("/category/video")
        assert "Load More" in response.text
        assert "after=cursor-2" in response.text

        partial = client.get(
            "/partials/tools",
            params={"listing": "category", "category": "video", "after": "cursor-2"},
            headers={"HX-Request": "true"},
        )
        assert partial.status_code == 200
        assert "Video Tool 3" in partial.text
        assert "Video Tool 4" in partial.text
        assert "Video Tool 1" not in partial.text
        assert "after=cursor-4" in partial.text

    def test_tool_page(self, client):
        response = client.get("/tool/video-tool-2")
        assert response.status_code == 200
        assert "Video Tool 2" in response.text
        assert "Related Tools" in response.text
        assert "SoftwareApplication" in response.text
        assert "BreadcrumbList" in response.text
        assert response.text.count('class="tool-card"') == 3

    def test_missing_tool_is_404(self, client):
        response = client.get("/tool/nope")
        assert response.status_code == 404
        assert "Tool Not Found" in response.text

    def test_ad_slots_render_when_configured(self, client, monkeypatch):
        monkeypatch.setattr(ads, "ADSENSE_CLIENT", "ca-pub-42")
        monkeypatch.setattr(ads, "ADSENSE_SLOTS", {"listing": "5678"})
        response = client.get("/tools")
        assert "adsbygoogle.js?client=ca-pub-42" in response.text
        assert 'data-ad-slot="5678"' in response.text

    def test_no_ads_by_default(self, client):
        assert "adsbygoogle" not in client.get("/tools").text

    def test_search_partial(self, client):
        response = client.get("/partials/search", params={"q": "wizard"}, headers={"HX-Request": "true"})
        assert "Chart Wizard" in response.text


class TestBookmarks:
    def test_toggle_round_trip(self, client):
        response = client.post("/bookmarks/pandas-ai", data={"name": "Pandas AI"})
        assert response.status_code == 200
        assert "Bookmarked" in response.text

        page = client.get("/bookmarks")
        assert "Pandas AI" in page.text
        assert "/tool/pandas-ai" in page.text

        tool_page = client.get("/tool/pandas-ai")
        assert "Bookmarked" in tool_page.text

        response = client.post("/bookmarks/pandas-ai", data={"name": "Pandas AI"})
        assert "Bookmarked" not in response.text
        assert "You haven't bookmarked any tools yet." in client.get("/bookmarks").text

    def test_remove(self, client):
        client.post("/bookmarks/sora", data={"name": "Sora"})
        client.post("/bookmarks/sora/remove")
        assert "Sora" not in client.get("/bookmarks").text

    def test_session_cookie_stays_within_browser_limit(self, client):
        sizes = []
        for i in range(60):
            response = client.post(f"/bookmarks/ai-tool-number-{i}", data={"name": f"AI Tool Number {i}"})
            assert response.status_code == 200
            sizes.append(len(response.headers.get("set-cookie", "")))

        assert max(sizes) < 4096
        assert "Bookmark limit reached" in response.text

        page = client.get("/bookmarks").text
        assert "/tool/ai-tool-number-0" in page
        assert "/tool/ai-tool-number-59" not in page
