"""SEO metadata and JSON-LD structured data for directory pages."""

import re
from typing import Dict
from typing import List
from typing import Optional

from bs4 import BeautifulSoup

from .config import SITE_DESCRIPTION
from .config import SITE_NAME
from .config import SITE_URL
from .models import Tool

READ_MORE_LINK = re.compile(r"<a\s+[^>]*>\s*Read more\s*</a>", re.IGNORECASE)


def strip_html(html: Optional[str]) -> str:
    """Plain text of a rich-text fragment."""
    if not html:
        return ""
    text = BeautifulSoup(html, "html.parser").get_text(" ")
    return re.sub(r"\s+", " ", text).strip()


def clean_excerpt(excerpt: Optional[str]) -> str:
    """Drop the CMS's trailing "Read more" link from an excerpt."""
    if not excerpt:
        return ""
    return READ_MORE_LINK.sub("", excerpt).strip()


def generate_meta_description(tool_name: str, description: str, max_length: int = 160) -> str:
    """Generate SEO-optimized meta description."""
    if not description:
        return f"Complete guide to {tool_name}. Features, pricing, alternatives, and how to get started."

    # Clean and truncate description
    clean_desc = description.strip()
    if len(clean_desc) <= max_length:
        return clean_desc

    # Truncate at sentence boundary
    sentences = clean_desc.split(". ")
    result = sentences[0]

    # If first sentence is too long, hard truncate it
    if len(result) > max_length - 3:
        return result[: max_length - 3] + "..."

    for sentence in sentences[1:]:
        if len(result + ". " + sentence) <= max_length - 3:
            result += ". " + sentence
        else:
            break

    if not result.endswith("."):
        result += "..."

    return result


def generate_page_metadata(
    title: str,
    description: str,
    canonical: Optional[str] = None,
    og_image: Optional[str] = None,
    og_type: str = "website",
) -> Dict:
    """Title, description, canonical URL, Open Graph and Twitter card values."""
    url = canonical or SITE_URL
    image = og_image or f"{SITE_URL}/og-image.png"
    return {
        "title": title,
        "description": description,
        "canonical": url,
        "openGraph": {
            "title": title,
            "description": description,
            "url": url,
            "siteName": SITE_NAME,
            "images": [image],
            "type": og_type,
        },
        "twitter": {
            "card": "summary_large_image",
            "title": title,
            "description": description,
            "images": [image],
        },
    }


def tool_url(tool: Tool, base_url: str = SITE_URL) -> str:
    return f"{base_url.rstrip('/')}/tool/{tool.slug}"


def category_url(slug: str, base_url: str = SITE_URL) -> str:
    return f"{base_url.rstrip('/')}/category/{slug}"


def generate_tool_metadata(tool: Tool, base_url: str = SITE_URL) -> Dict:
    description = generate_meta_description(tool.title, strip_html(clean_excerpt(tool.excerpt)))
    return generate_page_metadata(tool.title, description, tool_url(tool, base_url), tool.image_url)


def generate_category_metadata(category_name: str, slug: str, base_url: str = SITE_URL) -> Dict:
    title = f"Best {category_name} AI Tools"
    description = (
        f"Discover the top {category_name} AI tools. "
        "Compare features, pricing, and find the perfect solution for your needs."
    )
    return generate_page_metadata(title, description, category_url(slug, base_url))


def generate_website_schema(base_url: str = SITE_URL) -> Dict:
    return {
        "@context": "https://schema.org",
        "@type": "WebSite",
        "name": SITE_NAME,
        "url": base_url,
        "description": SITE_DESCRIPTION,
        "potentialAction": {
            "@type": "SearchAction",
            "target": f"{base_url}/search?q={{search_term_string}}",
            "query-input": "required name=search_term_string",
        },
    }


def generate_webpage_schema(title: str, description: str, url: str, base_url: str = SITE_URL) -> Dict:
    return {
        "@context": "https://schema.org",
        "@type": "WebPage",
        "name": title,
        "description": description,
        "url": url,
        "isPartOf": {"@type": "WebSite", "name": SITE_NAME, "url": base_url},
    }


def generate_tech_article_schema(
    title: str,
    description: str,
    image: str,
    date_published: str,
    date_modified: str,
    url: str,
    base_url: str = SITE_URL,
) -> Dict:
    organization = {"@type": "Organization", "name": SITE_NAME}
    return {
        "@context": "https://schema.org",
        "@type": "TechArticle",
        "headline": title,
        "description": description,
        "image": image,
        "datePublished": date_published,
        "dateModified": date_modified,
        "author": organization,
        "publisher": {**organization, "logo": {"@type": "ImageObject", "url": f"{base_url}/logo.png"}},
        "mainEntityOfPage": {"@type": "WebPage", "@id": url},
    }


def generate_tool_schema(tool: Tool, url: str) -> Dict:
    """SoftwareApplication JSON-LD for a tool page."""
    return {
        "@context": "https://schema.org",
        "@type": "SoftwareApplication",
        "name": tool.title,
        "description": strip_html(tool.excerpt),
        "url": url,
        "applicationCategory": "AI Tool",
        "operatingSystem": "Web",
        "offers": {"@type": "Offer", "price": "0", "priceCurrency": "USD"},
        "image": tool.image_url or "",
        "dateModified": tool.modified_gmt,
    }


def generate_breadcrumb_list(path_segments: List[Dict[str, str]], base_url: str) -> Dict:
    """
    Generate JSON-LD breadcrumb structured data.

    Args:
        path_segments: List of {"name": "Display Name", "url": "relative/path"}
        base_url: Base URL for the site
    """
    items = []

    for i, segment in enumerate(path_segments, 1):
        items.append(
            {
                "@type": "ListItem",
                "position": i,
                "name": segment["name"],
                "item": f"{base_url.rstrip('/')}/{segment['url'].lstrip('/')}".rstrip("/"),
            }
        )

    return {"@context": "https://schema.org", "@type": "BreadcrumbList", "itemListElement": items}
