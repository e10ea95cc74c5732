"""Category membership for tools.

Links into a category may use either the CMS slug or the display name, raw
or URL-encoded, in any case. Both sides are reduced with the same
normalization before comparing.
"""

import re
import unicodedata
from typing import Iterable
from typing import List
from typing import Optional
from urllib.parse import unquote_plus

from .models import Tool
from .models import ToolEdge

_TOKEN_RUN = re.compile(r"[a-z0-9]+")


def normalize_category_token(token: Optional[str]) -> str:
    """
    Reduce a category slug, name, or URL token to its canonical form.

    Rules:
    - URL-decode
    - Fold unicode to ASCII
    - Lowercase
    - Keep runs of [a-z0-9] joined by single hyphens
    """
    if not token:
        return ""

    text = unquote_plus(token)
    text = unicodedata.normalize("NFKD", text)
    text = text.encode("ascii", "ignore").decode("ascii")
    return "-".join(_TOKEN_RUN.findall(text.lower()))


def tool_matches_category(tool: Tool, token: Optional[str]) -> bool:
    """True if any of the tool's categories matches by slug or by name."""
    target = normalize_category_token(token)
    if not target:
        return False
    for category in tool.category_list:
        if normalize_category_token(category.slug) == target:
            return True
        if normalize_category_token(category.name) == target:
            return True
    return False


def filter_edges(edges: Iterable[ToolEdge], token: Optional[str]) -> List[ToolEdge]:
    """Keep edges whose tool belongs to the category, preserving order."""
    edges = list(edges)
    if not token:
        return edges
    return [edge for edge in edges if tool_matches_category(edge.node, token)]


def filter_tools(tools: Iterable[Tool], token: Optional[str]) -> List[Tool]:
    tools = list(tools)
    if not token:
        return tools
    return [tool for tool in tools if tool_matches_category(tool, token)]
