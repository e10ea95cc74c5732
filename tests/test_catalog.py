import pytest

from ai_tools_directory.catalog import Catalog
from ai_tools_directory.catalog import sanitize_search_term
from ai_tools_directory.errors import NotFound
from ai_tools_directory.models import Tool
from tests.conftest import FakeCMS
from tests.conftest import make_tool


@pytest.mark.asyncio
async def test_tools_filters_page_but_keeps_page_info(cms):
    page = await Catalog(cms.source()).tools(7, category="Data-Analysis")
    assert [t.slug for t in page.tools] == ["pandas-ai", "chart-wizard"]
    assert page.page_info.has_next_page is True
    assert page.page_info.end_cursor == "cursor-7"


@pytest.mark.asyncio
async def test_tools_without_category_is_unfiltered(cms):
    page = await Catalog(cms.source()).tools(100)
    assert len(page.edges) == 8
    assert page.page_info.has_next_page is False


@pytest.mark.asyncio
async def test_missing_category_and_tool_raise_not_found(cms):
    catalog = Catalog(cms.source())
    with pytest.raises(NotFound):
        await catalog.category("nope")
    with pytest.raises(NotFound):
        await catalog.tool("nope")


@pytest.mark.asyncio
async def test_related_tools_exclude_current_and_cap_at_three(cms):
    catalog = Catalog(cms.source())
    tool = await catalog.tool("video-tool-2")
    related = await catalog.related_tools(tool)
    assert [t.slug for t in related] == ["video-tool-1", "video-tool-3", "video-tool-4"]
    assert all(t.slug != tool.slug for t in related)


@pytest.mark.asyncio
async def test_related_tools_match_by_category_name_too():
    cms = FakeCMS(
        [
            make_tool("pandas-ai", categories=(("Data Analysis", "data-analysis"),)),
            make_tool("chart-wizard", categories=(("Data Analysis", "analytics"),)),
        ]
    )
    catalog = Catalog(cms.source())
    tool = Tool.model_validate(make_tool("viz", categories=(("Data Analysis", "data-analysis"),)))
    assert [t.slug for t in await catalog.related_tools(tool)] == ["pandas-ai", "chart-wizard"]


@pytest.mark.asyncio
async def test_related_tools_for_uncategorized_tool_is_empty(cms):
    catalog = Catalog(cms.source())
    tool = await catalog.tool("uncategorized")
    requests_before = len(cms.requests)
    assert await catalog.related_tools(tool) == []
    assert len(cms.requests) == requests_before


@pytest.mark.asyncio
async def test_search_skips_short_terms(cms):
    catalog = Catalog(cms.source())
    assert await catalog.search("ab") == []
    assert await catalog.search("  !!  ") == []
    assert cms.requests == []


@pytest.mark.asyncio
async def test_search_queries_sanitized_term(cms):
    results = await Catalog(cms.source()).search("Pandas!!")
    assert [t.slug for t in results] == ["pandas-ai"]
    assert cms.requests[-1]["variables"]["search"] == "Pandas"


def test_sanitize_search_term_caps_length():
    assert sanitize_search_term("x" * 500) == "x" * 100
    assert sanitize_search_term("  video   editing_tools ") == "video editing tools"
    assert sanitize_search_term("<b>Pandas</b>") == "b Pandas b"
    assert sanitize_search_term(None) == ""
