"""Typed records for the catalogue as served by the CMS.

Field names on the wire follow the CMS's GraphQL schema (camelCase); the
Python attributes are snake_case aliases of them.
"""

from typing import Dict
from typing import List
from typing import Optional

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import field_validator


class CatalogModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> Dict:
        """Serialize with the CMS field names."""
        return self.model_dump(by_alias=True, mode="json")


class Category(CatalogModel):
    """A tool category."""

    name: str
    slug: str
    id: Optional[str] = None
    description: Optional[str] = None
    count: Optional[int] = None


class CategoryConnection(CatalogModel):
    nodes: List[Category] = Field(default_factory=list)


class ImageNode(CatalogModel):
    source_url: Optional[str] = Field(default=None, alias="sourceUrl")


class FeaturedImage(CatalogModel):
    node: Optional[ImageNode] = None


class Tool(CatalogModel):
    """A single AI tool. Read-only; the CMS owns it."""

    id: str
    title: str
    slug: str
    excerpt: str = ""
    content: str = ""
    categories: CategoryConnection = Field(default_factory=CategoryConnection, alias="aiToolCategories")
    featured_image: Optional[FeaturedImage] = Field(default=None, alias="featuredImage")
    affiliate_link: Optional[str] = Field(default=None, alias="affiliateLink")
    modified_gmt: Optional[str] = Field(default=None, alias="modifiedGmt")

    @field_validator("excerpt", "content", mode="before")
    @classmethod
    def _null_text_is_empty(cls, value):
        # The CMS sends null for posts with no excerpt or body
        return "" if value is None else value

    @property
    def category_list(self) -> List[Category]:
        return self.categories.nodes

    @property
    def primary_category(self) -> Optional[Category]:
        return self.categories.nodes[0] if self.categories.nodes else None

    @property
    def image_url(self) -> Optional[str]:
        if self.featured_image and self.featured_image.node:
            return self.featured_image.node.source_url
        return None


class PageInfo(CatalogModel):
    has_next_page: bool = Field(default=False, alias="hasNextPage")
    end_cursor: Optional[str] = Field(default=None, alias="endCursor")


class ToolEdge(CatalogModel):
    node: Tool
    cursor: Optional[str] = None


class ToolPage(CatalogModel):
    """One page of tools plus the cursor for the next one."""

    page_info: PageInfo = Field(default_factory=PageInfo, alias="pageInfo")
    edges: List[ToolEdge] = Field(default_factory=list)

    @property
    def tools(self) -> List[Tool]:
        return [edge.node for edge in self.edges]


class ToolStats(CatalogModel):
    tool_count: int = Field(alias="toolCount")
    category_count: int = Field(alias="categoryCount")
