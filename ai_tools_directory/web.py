import json
import logging
from dataclasses import dataclass
from datetime import datetime
from datetime import timezone
from typing import Dict
from typing import List
from typing import Optional
from urllib.parse import urlencode

from fasthtml.common import H1
from fasthtml.common import H2
from fasthtml.common import H3
from fasthtml.common import H5
from fasthtml.common import A
from fasthtml.common import Body
from fasthtml.common import Button
from fasthtml.common import Div
from fasthtml.common import Form
from fasthtml.common import Head
from fasthtml.common import Hidden
from fasthtml.common import Html
from fasthtml.common import Img
from fasthtml.common import Input
from fasthtml.common import Li
from fasthtml.common import Link
from fasthtml.common import Meta
from fasthtml.common import Nav
from fasthtml.common import NotStr
from fasthtml.common import P
from fasthtml.common import Script
from fasthtml.common import Section
from fasthtml.common import Span
from fasthtml.common import StyleX
from fasthtml.common import Title
from fasthtml.common import Ul
from fasthtml.common import to_xml
from fasthtml.fastapp import fast_app
from starlette.responses import HTMLResponse
from starlette.responses import JSONResponse
from starlette.staticfiles import StaticFiles

from ai_tools_directory.ads import ad_slot
from ai_tools_directory.ads import adsense_loader
from ai_tools_directory.bookmarks import BookmarkStore
from ai_tools_directory.bookmarks import SessionStorage
from ai_tools_directory.catalog import Catalog
from ai_tools_directory.config import BASE_PATH
from ai_tools_directory.config import DEV_MODE
from ai_tools_directory.config import HOME_PAGE_SIZE
from ai_tools_directory.config import LOG_LEVEL
from ai_tools_directory.config import PAGE_SIZE
from ai_tools_directory.config import SESSION_SECRET
from ai_tools_directory.config import SITE_NAME
from ai_tools_directory.config import SITE_URL
from ai_tools_directory.config import STATIC_DIR
from ai_tools_directory.config import WEB_BOOKMARKS_MAX_BYTES
from ai_tools_directory.config import WEB_PORT
from ai_tools_directory.content_source import ContentSource
from ai_tools_directory.errors import BookmarkLimitReached
from ai_tools_directory.errors import CatalogError
from ai_tools_directory.errors import NotFound
from ai_tools_directory.logging_config import setup_logging
from ai_tools_directory.models import Category
from ai_tools_directory.models import Tool
from ai_tools_directory.models import ToolPage
from ai_tools_directory.seo_utils import clean_excerpt
from ai_tools_directory.seo_utils import generate_breadcrumb_list
from ai_tools_directory.seo_utils import generate_category_metadata
from ai_tools_directory.seo_utils import generate_page_metadata
from ai_tools_directory.seo_utils import generate_tech_article_schema
from ai_tools_directory.seo_utils import generate_tool_metadata
from ai_tools_directory.seo_utils import generate_tool_schema
from ai_tools_directory.seo_utils import generate_webpage_schema
from ai_tools_directory.seo_utils import generate_website_schema
from ai_tools_directory.seo_utils import strip_html
from ai_tools_directory.seo_utils import tool_url

setup_logging(LOG_LEVEL)

logger = logging.getLogger(__name__)

catalog = Catalog(ContentSource())

MAX_PAGE_SIZE = 100

CATEGORY_DESCRIPTIONS = {
    "Text": "Text generation, processing, and language models for content creation.",
    "Image": "AI-powered image generation, editing, and enhancement tools.",
    "Voice": "Voice synthesis, recognition, and audio processing solutions.",
    "Video": "Video creation, editing, and AI-enhanced production tools.",
    "Code": "Code generation, analysis, and development assistance tools.",
    "Data Analysis": "Advanced data processing, visualization, and analytics platforms.",
    "Audio": "Audio processing, music generation, and sound editing tools.",
    "3D": "3D modeling, animation, and visualization tools.",
    "Business": "Business automation, productivity, and management tools.",
    "Other": "Other innovative AI tools and solutions.",
}


def url(path: str) -> str:
    """Prefix path with BASE_PATH for subdirectory deployment"""
    if not path.startswith("/"):
        path = f"/{path}"
    return f"{BASE_PATH}{path}"


def get_canonical_url(path: str = "") -> str:
    path = path.strip("/")
    return f"{SITE_URL}/{path}" if path else SITE_URL


def clamp_page_size(first: Optional[int]) -> int:
    if not first or first < 1:
        return PAGE_SIZE
    return min(first, MAX_PAGE_SIZE)


def bookmark_store(session) -> BookmarkStore:
    return BookmarkStore(SessionStorage(session), max_bytes=WEB_BOOKMARKS_MAX_BYTES)


@dataclass(frozen=True)
class ListingConfig:
    """Selects what a tool listing page fetches and how it is titled."""

    kind: str
    title: str
    heading: str
    intro: str
    path: str
    category: Optional[str] = None
    server_filter: bool = False

    async def fetch(self, after: Optional[str] = None) -> ToolPage:
        if self.category and self.server_filter:
            return await catalog.category_tools(self.category, PAGE_SIZE, after)
        return await catalog.tools(PAGE_SIZE, after, self.category)

    def partial_url(self, after: Optional[str]) -> str:
        params = {"listing": self.kind, "after": after or ""}
        if self.category:
            params["category"] = self.category
        return url(f"/partials/tools?{urlencode(params)}")


def all_tools_listing() -> ListingConfig:
    return ListingConfig(
        kind="all",
        title="All AI Tools",
        heading="Discover AI Tools",
        intro="Explore our curated collection of cutting-edge AI tools to supercharge your workflow",
        path="/tools",
    )


def category_listing(slug: str, name: Optional[str] = None) -> ListingConfig:
    name = name or slug.replace("-", " ").title()
    return ListingConfig(
        kind="category",
        title=f"{name} AI Tools",
        heading=f"{name} AI Tools",
        intro=CATEGORY_DESCRIPTIONS.get(name, f"Discover {name.lower()} AI tools and solutions."),
        path=f"/category/{slug}",
        category=slug,
    )


def listing_for(kind: str, category: Optional[str]) -> ListingConfig:
    if kind == "category" and category:
        return category_listing(category)
    return all_tools_listing()


# Components
def page_head(meta: Dict, *extra):
    og = meta["openGraph"]
    twitter = meta["twitter"]
    return Head(
        Title(meta["title"]),
        Meta({"charset": "utf-8"}),
        Meta({"name": "viewport", "content": "width=device-width, initial-scale=1"}),
        Meta({"name": "description", "content": meta["description"]}),
        Meta({"name": "robots", "content": "index, follow"}),
        Meta({"property": "og:title", "content": og["title"]}),
        Meta({"property": "og:description", "content": og["description"]}),
        Meta({"property": "og:url", "content": og["url"]}),
        Meta({"property": "og:site_name", "content": og["siteName"]}),
        Meta({"property": "og:image", "content": og["images"][0]}),
        Meta({"property": "og:type", "content": og["type"]}),
        Meta({"name": "twitter:card", "content": twitter["card"]}),
        Meta({"name": "twitter:title", "content": twitter["title"]}),
        Meta({"name": "twitter:description", "content": twitter["description"]}),
        Meta({"name": "twitter:image", "content": twitter["images"][0]}),
        Link(rel="canonical", href=meta["canonical"]),
        Script(src="https://unpkg.com/htmx.org@2.0.3"),
        StyleX(str(STATIC_DIR / "styles.css")),
        adsense_loader(),
        *extra,
    )


def json_ld(schema: Dict):
    return Script(json.dumps(schema), type="application/ld+json")


def site_nav():
    return Nav(
        A(SITE_NAME, href=url("/"), _class="brand"),
        A("All Tools", href=url("/tools")),
        A("Bookmarks", href=url("/bookmarks")),
        _class="site-nav",
    )


def breadcrumbs(*items):
    """Links for all but the last item, which is the current page."""
    parts = []
    for i, (name, href) in enumerate(items):
        if i:
            parts.append(" › ")
        parts.append(A(name, href=href) if href and i < len(items) - 1 else Span(name))
    return Div(*parts, _class="breadcrumbs")


def tool_card(tool: Tool):
    category = tool.primary_category
    return Div(
        A(
            Img(src=tool.image_url or url("/static/placeholder.svg"), alt=f"{tool.title} preview", loading="lazy"),
            href=url(f"/tool/{tool.slug}"),
            _class="tool-preview",
        ),
        H5(A(tool.title, href=url(f"/tool/{tool.slug}"))),
        Span(category.name if category else "AI Tool", _class="tool-category"),
        _class="tool-card",
        **{"data-search": f"{tool.title.lower()} {strip_html(tool.excerpt).lower()}"},
    )


def load_more(config: ListingConfig, page: ToolPage):
    if not page.page_info.has_next_page:
        return None
    return Div(
        Button(
            "Load More",
            hx_get=config.partial_url(page.page_info.end_cursor),
            hx_target="closest .load-more",
            hx_swap="outerHTML",
            hx_disabled_elt="this",
        ),
        _class="load-more",
    )


def error_alert(retry_href: str, exc: Optional[Exception] = None, **retry_attrs):
    details = P(f"Error details: {exc}", _class="error-details") if DEV_MODE and exc else None
    return Div(
        H5("Error Loading AI Tools"),
        P("We're sorry, but there was an error loading the AI tools. Please try again later."),
        details,
        A("Try again", href=retry_href, _class="retry-button", **retry_attrs),
        _class="alert alert-error",
        role="alert",
    )


def empty_alert(message: str = "No AI tools are currently available. Please check back later."):
    return Div(
        H5("No AI Tools Found"),
        P(message),
        _class="alert alert-empty",
    )


def tool_listing(config: ListingConfig, page: ToolPage):
    if not page.edges and not page.page_info.has_next_page:
        return empty_alert(
            "No AI tools are currently available in this category. Please check back later."
            if config.category
            else "No AI tools are currently available. Please check back later."
        )
    return Div(*[tool_card(t) for t in page.tools], load_more(config, page), id="tool-grid", _class="tools-grid")


def category_card(category: Category):
    description = category.description or CATEGORY_DESCRIPTIONS.get(
        category.name, f"Discover {category.name.lower()} AI tools and solutions."
    )
    count = category.count or 0
    return A(
        Div(
            H3(category.name),
            P(description),
            Span(f"{count} {'tool' if count == 1 else 'tools'} available", _class="count"),
            _class="category-card",
        ),
        href=url(f"/category/{category.slug}"),
    )


def bookmark_button(tool: Tool, bookmarked: bool, notice: Optional[str] = None):
    return Form(
        Hidden(name="name", value=tool.title),
        Button("Bookmarked" if bookmarked else "Bookmark", _class="bookmarked" if bookmarked else "bookmark"),
        P(notice, _class="bookmark-notice") if notice else None,
        hx_post=url(f"/bookmarks/{tool.slug}"),
        hx_swap="outerHTML",
        _class="bookmark-form",
    )


def search_box():
    return Div(
        Input(
            type="search",
            name="q",
            id="search",
            placeholder="Search AI tools...",
            hx_get=url("/partials/search"),
            hx_trigger="input changed delay:500ms, search",
            hx_target="#search-results",
        ),
        Div(id="search-results"),
        _class="search",
    )


def format_modified(value: Optional[str]) -> str:
    if not value:
        return "Recently updated"
    try:
        modified = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return "Recently updated"
    if modified.tzinfo is None:
        modified = modified.replace(tzinfo=timezone.utc)
    return modified.strftime("%B %d, %Y %H:%M UTC")


def layout(meta: Dict, *content, head_extra=()):
    return Html(
        page_head(meta, *head_extra),
        Body(site_nav(), Div(*content, _class="main-window")),
    )


def not_found_page(title: str, message: str) -> HTMLResponse:
    meta = generate_page_metadata(title, message)
    page = layout(meta, H1(title), P(message), A("Back to all tools", href=url("/tools")))
    return HTMLResponse(to_xml(page), status_code=404)


def api_error(error: str, exc: Exception) -> JSONResponse:
    status_code = getattr(exc, "status_code", 500)
    return JSONResponse({"error": error, "details": str(exc)}, status_code=status_code)


# App setup
app, rt = fast_app(secret_key=SESSION_SECRET)
app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")


# JSON API
@rt("/api/tools")
async def api_tools(first: int = PAGE_SIZE, after: str = None, category: str = None):
    try:
        page = await catalog.tools(clamp_page_size(first), after or None, category or None)
    except CatalogError as exc:
        logger.error(f"Error fetching AI tools: {exc}")
        return api_error("Failed to fetch AI Tools", exc)
    return JSONResponse(page.to_wire())


@rt("/api/tools/{slug}")
async def api_tool(slug: str):
    try:
        tool = await catalog.tool(slug)
    except NotFound as exc:
        return api_error("Tool not found", exc)
    except CatalogError as exc:
        logger.error(f"Error fetching tool {slug}: {exc}")
        return api_error("Failed to fetch tool", exc)
    return JSONResponse(tool.to_wire())


@rt("/api/categories")
async def api_categories():
    try:
        categories = await catalog.categories()
    except CatalogError as exc:
        logger.error(f"Error fetching categories: {exc}")
        return api_error("Failed to fetch categories", exc)
    return JSONResponse({"nodes": [c.to_wire() for c in categories]})


@rt("/api/categories/{slug}")
async def api_category(slug: str):
    try:
        category = await catalog.category(slug)
    except NotFound as exc:
        return api_error("Category not found", exc)
    except CatalogError as exc:
        logger.error(f"Error fetching category {slug}: {exc}")
        return api_error("Failed to fetch category", exc)
    return JSONResponse(category.to_wire())


@rt("/api/category-tools")
async def api_category_tools(first: int = PAGE_SIZE, after: str = None, category: str = None):
    if not category:
        return JSONResponse({"error": "Category is required", "details": "Missing 'category' parameter"}, status_code=400)
    try:
        page = await catalog.category_tools(category, clamp_page_size(first), after or None)
    except CatalogError as exc:
        logger.error(f"Error fetching category tools: {exc}")
        return api_error("Failed to fetch Category Tools", exc)
    return JSONResponse(page.to_wire())


@rt("/api/tool-stats")
async def api_tool_stats():
    try:
        stats = await catalog.stats()
    except CatalogError as exc:
        logger.error(f"Error fetching tool stats: {exc}")
        return api_error("Failed to fetch tool stats", exc)
    return JSONResponse(stats.to_wire())


@rt("/api/search")
async def api_search(q: str = ""):
    try:
        results = await catalog.search(q)
    except CatalogError as exc:
        logger.error(f"Error searching tools: {exc}")
        return api_error("Failed to search tools", exc)
    return JSONResponse(
        [
            {"id": t.id, "title": t.title, "slug": t.slug, "featuredImage": t.to_wire()["featuredImage"]}
            for t in results
        ]
    )


# Pages
@rt("/")
async def get():
    meta = generate_page_metadata(f"{SITE_NAME} - Discover the Best AI Tools", "Discover and compare the best AI tools")

    try:
        stats = await catalog.stats()
        stats_block = Div(
            Span(f"{stats.tool_count:,} AI tools"), Span(f"{stats.category_count:,} categories"), _class="stats"
        )
    except CatalogError as exc:
        logger.error(f"Error fetching stats: {exc}")
        stats_block = Div(Span("N/A AI tools"), Span("N/A categories"), _class="stats")

    try:
        categories = await catalog.categories()
        categories_block = Div(*[category_card(c) for c in categories[:6]], _class="categories-grid")
    except CatalogError as exc:
        logger.error(f"Error fetching categories: {exc}")
        categories_block = P("Failed to load categories", _class="error")

    try:
        latest = await catalog.tools(HOME_PAGE_SIZE)
        latest_block = (
            Div(*[tool_card(t) for t in latest.tools], _class="tools-grid") if latest.edges else empty_alert()
        )
    except CatalogError as exc:
        logger.error(f"Error fetching latest tools: {exc}")
        latest_block = error_alert(url("/"), exc)

    return layout(
        meta,
        H1("Discover AI Tools", _class="window-title"),
        P("Discover Best AI Tools for Every Need in One Place!", _class="intro"),
        search_box(),
        stats_block,
        ad_slot("home"),
        Section(
            Div(H2("AI Tool Categories"), _class="section-header"),
            P("Explore our curated collection of AI tools across different categories"),
            categories_block,
        ),
        Section(
            Div(H2("Latest AI Tools"), A("View All", href=url("/tools")), _class="section-header"),
            latest_block,
        ),
        head_extra=(json_ld(generate_website_schema(SITE_URL)),),
    )


async def render_listing(config: ListingConfig, crumbs, meta: Dict):
    try:
        page = await config.fetch()
        body = tool_listing(config, page)
    except CatalogError as exc:
        logger.error(f"Error loading tools for {config.path}: {exc}")
        body = error_alert(url(config.path), exc)

    schema = generate_webpage_schema(meta["title"], meta["description"], meta["canonical"])
    breadcrumb_schema = generate_breadcrumb_list(
        [{"name": "Home", "url": ""}, {"name": config.title, "url": config.path}], SITE_URL
    )
    return layout(
        meta,
        crumbs,
        H1(config.heading, _class="category-title"),
        P(config.intro, _class="category-intro"),
        ad_slot("listing"),
        body,
        head_extra=(json_ld(schema), json_ld(breadcrumb_schema)),
    )


@rt("/tools")
async def tools_page():
    config = all_tools_listing()
    meta = generate_page_metadata(
        f"{config.title} | {SITE_NAME}", config.intro, get_canonical_url(config.path)
    )
    return await render_listing(config, breadcrumbs(("Home", url("/")), ("All Tools", None)), meta)


@rt("/category/{slug}")
async def category_page(slug: str):
    name = None
    try:
        name = (await catalog.category(slug)).name
    except NotFound:
        logger.info(f"Category {slug} not in CMS, using slug as name")
    except CatalogError as exc:
        logger.error(f"Error fetching category {slug}: {exc}")

    name = name or slug.replace("-", " ").title()
    config = category_listing(slug, name)
    meta = generate_category_metadata(name, slug, SITE_URL)
    crumbs = breadcrumbs(("Home", url("/")), (name, None))
    return await render_listing(config, crumbs, meta)


@rt("/partials/tools")
async def tools_partial(listing: str = "all", category: str = None, after: str = None):
    """Next page of cards plus a fresh Load More button, swapped in place of the old button."""
    config = listing_for(listing, category)
    try:
        page = await config.fetch(after or None)
    except CatalogError as exc:
        logger.error(f"Error loading more tools for {config.path}: {exc}")
        return Div(
            error_alert(
                config.partial_url(after),
                exc,
                hx_get=config.partial_url(after),
                hx_target="closest .load-more",
                hx_swap="outerHTML",
            ),
            _class="load-more",
        )
    parts = [tool_card(t) for t in page.tools]
    more = load_more(config, page)
    if more is not None:
        parts.append(more)
    return tuple(parts) if parts else ""


@rt("/partials/search")
async def search_partial(q: str = ""):
    try:
        results = await catalog.search(q)
    except CatalogError as exc:
        logger.error(f"Error searching tools: {exc}")
        return P("Search is unavailable right now.", _class="search-error")
    if not results:
        return ""
    return Ul(
        *[
            Li(
                Img(src=t.image_url or url("/static/placeholder.svg"), alt="", width="24", height="24"),
                A(t.title, href=url(f"/tool/{t.slug}")),
            )
            for t in results
        ],
        _class="search-results",
    )


@rt("/tool/{slug}")
async def tool_page(slug: str, session):
    try:
        tool = await catalog.tool(slug)
    except NotFound:
        return not_found_page("Tool Not Found", f"No tool found with slug: {slug}")
    except CatalogError as exc:
        logger.error(f"Error fetching tool {slug}: {exc}")
        meta = generate_page_metadata("Error Loading AI Tool", "The tool could not be loaded.")
        return HTMLResponse(to_xml(layout(meta, error_alert(url(f"/tool/{slug}"), exc))), status_code=500)

    try:
        related_tools: List[Tool] = await catalog.related_tools(tool)
    except CatalogError as exc:
        logger.error(f"Error fetching related tools for {slug}: {exc}")
        related_tools = []

    page_url = tool_url(tool, SITE_URL)
    meta = generate_tool_metadata(tool, SITE_URL)
    category = tool.primary_category
    crumb_items = [{"name": "Home", "url": ""}]
    if category:
        crumb_items.append({"name": category.name, "url": f"category/{category.slug}"})
    crumb_items.append({"name": tool.title, "url": f"tool/{tool.slug}"})
    article_schema = generate_tech_article_schema(
        tool.title,
        meta["description"],
        tool.image_url or "",
        tool.modified_gmt or "",
        tool.modified_gmt or "",
        page_url,
    )

    return layout(
        meta,
        breadcrumbs(
            ("Home", url("/")),
            *([(category.name, url(f"/category/{category.slug}"))] if category else []),
            (tool.title, None),
        ),
        Div(
            Div(
                Div(
                    H1(tool.title, _class="tool-title"),
                    bookmark_button(tool, bookmark_store(session).is_bookmarked(tool.slug)),
                    _class="tool-header",
                ),
                A(category.name, href=url(f"/category/{category.slug}"), _class="category-badge") if category else None,
                Div(NotStr(clean_excerpt(tool.excerpt)), _class="tool-excerpt") if tool.excerpt else None,
                A("Explore Website", href=tool.affiliate_link, target="_blank", rel="noopener noreferrer", _class="cta-button")
                if tool.affiliate_link
                else Span("No affiliate link available", _class="muted"),
                Img(src=tool.image_url, alt=f"{tool.title} Preview", _class="tool-image") if tool.image_url else None,
                Div(NotStr(tool.content), _class="tool-content") if tool.content else None,
                P(f"Last updated: {format_modified(tool.modified_gmt)}", _class="last-updated")
                if tool.modified_gmt
                else None,
                ad_slot("tool_page"),
                _class="tool-main",
            ),
            Div(
                H3("Related Tools"),
                Div(*[tool_card(t) for t in related_tools], _class="related-tools"),
                _class="sidebar",
            )
            if related_tools
            else None,
            _class="tool-layout",
        ),
        head_extra=(
            json_ld(generate_breadcrumb_list(crumb_items, SITE_URL)),
            json_ld(generate_tool_schema(tool, page_url)),
            json_ld(article_schema),
        ),
    )


@rt("/bookmarks/{slug}", methods=["post"])
def toggle_bookmark(slug: str, name: str, session):
    tool = Tool(id=slug, title=name, slug=slug)
    try:
        bookmarked = bookmark_store(session).toggle(slug, name)
    except BookmarkLimitReached as exc:
        logger.warning(f"Bookmark {slug} not added: {exc}")
        return bookmark_button(tool, False, notice="Bookmark limit reached. Remove a bookmark to add another.")
    logger.info(f"Bookmark {slug}: {'added' if bookmarked else 'removed'}")
    return bookmark_button(tool, bookmarked)


@rt("/bookmarks/{slug}/remove", methods=["post"])
def remove_bookmark(slug: str, session):
    bookmark_store(session).remove(slug)
    return ""


@rt("/bookmarks")
def bookmarks_page(session):
    bookmarks = bookmark_store(session).all()
    meta = generate_page_metadata(f"Your Bookmarked Tools | {SITE_NAME}", "Tools you have bookmarked.")
    if bookmarks:
        body = Ul(
            *[
                Li(
                    A(entry.get("name", slug), href=url(f"/tool/{slug}")),
                    Button(
                        "Remove",
                        hx_post=url(f"/bookmarks/{slug}/remove"),
                        hx_target="closest li",
                        hx_swap="outerHTML",
                        _class="remove-bookmark",
                    ),
                    _class="bookmark-item",
                )
                for slug, entry in bookmarks.items()
            ],
            _class="bookmarks",
        )
    else:
        body = P("You haven't bookmarked any tools yet.", _class="muted")
    return layout(meta, H1("Your Bookmarked Tools"), ad_slot("bookmarks"), body)


@rt("/health")
def health():
    return {"status": "ok"}


# For direct script execution
if __name__ == "__main__":
    import uvicorn

    print(f"Starting server on port {WEB_PORT}")
    uvicorn.run("ai_tools_directory.web:app", host="0.0.0.0", port=WEB_PORT, reload=True)
