"""Shared fixtures: an in-memory CMS served through httpx.MockTransport."""

import json

import httpx
import pytest

from ai_tools_directory.content_source import ContentSource

CMS_URL = "https://cms.test/graphql"


def make_tool(slug, title=None, categories=(("Video", "video"),), **extra):
    node = {
        "id": f"id-{slug}",
        "title": title or slug.replace("-", " ").title(),
        "excerpt": f"<p>{slug} does useful things.</p>",
        "slug": slug,
        "aiToolCategories": {"nodes": [{"name": name, "slug": cat_slug} for name, cat_slug in categories]},
        "featuredImage": {"node": {"sourceUrl": f"https://img.test/{slug}.png"}},
    }
    node.update(extra)
    return node


class FakeCMS:
    def __init__(self, tools=None, categories=None):
        self.tools = list(tools or [])
        self.categories = list(categories or [])
        self.requests = []
        self.status_code = 200

    def _page(self, tools, first, after):
        start = int(after.split("-")[1]) if after else 0
        end = start + first
        chunk = tools[start:end]
        return {
            "pageInfo": {"hasNextPage": end < len(tools), "endCursor": f"cursor-{min(end, len(tools))}"},
            "edges": [{"cursor": f"cursor-{start + i + 1}", "node": node} for i, node in enumerate(chunk)],
        }

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.requests.append(body)
        if self.status_code != 200:
            return httpx.Response(self.status_code, text="upstream failure")

        query, variables = body["query"], body["variables"]
        if "GetAITools(" in query:
            data = {"aiTools": self._page(self.tools, variables["first"], variables.get("after"))}
        elif "GetCategoryTools(" in query:
            matching = [
                t
                for t in self.tools
                if any(c["slug"] == variables["category"] for c in t["aiToolCategories"]["nodes"])
            ]
            data = {"aiTools": self._page(matching, variables["first"], variables.get("after"))}
        elif "GetAITool(" in query:
            found = next((t for t in self.tools if t["slug"] == variables["slug"]), None)
            data = {"aiTool": found}
        elif "GetCategory(" in query:
            found = next((c for c in self.categories if c["slug"] == variables["slug"]), None)
            data = {"aiToolCategory": found}
        elif "GetCategories(" in query:
            data = {"aiToolCategories": {"nodes": self.categories[: variables["first"]]}}
        elif "GetToolStats" in query:
            data = {
                "aiTools": {"nodes": [{"id": t["id"]} for t in self.tools]},
                "aiToolCategories": {"nodes": [{"id": c.get("id", c["slug"])} for c in self.categories]},
            }
        elif "SearchAITools(" in query:
            term = variables["search"].lower()
            data = {"aiTools": {"nodes": [t for t in self.tools if term in t["title"].lower()][: variables["first"]]}}
        else:
            return httpx.Response(200, json={"errors": [{"message": "Unknown query"}]})
        return httpx.Response(200, json={"data": data})

    def source(self) -> ContentSource:
        return ContentSource(CMS_URL, transport=httpx.MockTransport(self.handler))


@pytest.fixture
def video_tools():
    return [make_tool(f"video-tool-{i}", f"Video Tool {i}") for i in range(1, 6)]


@pytest.fixture
def cms(video_tools):
    tools = video_tools + [
        make_tool("pandas-ai", "Pandas AI", categories=(("Data Analysis", "data-analysis"),)),
        make_tool("chart-wizard", "Chart Wizard", categories=(("Data Analysis", "analytics"),)),
        make_tool("uncategorized", "Uncategorized Tool", categories=()),
    ]
    categories = [
        {"id": "c1", "name": "Video", "slug": "video", "count": 5, "description": "Video tools"},
        {"id": "c2", "name": "Data Analysis", "slug": "data-analysis", "count": 1, "description": None},
    ]
    return FakeCMS(tools, categories)
