"""GraphQL documents sent to the CMS."""

TOOL_CARD_FIELDS = """
    id
    title
    excerpt
    slug
    aiToolCategories {
      nodes {
        name
        slug
      }
    }
    featuredImage {
      node {
        sourceUrl
      }
    }
"""

LIST_TOOLS = (
    """
query GetAITools($first: Int!, $after: String) {
  aiTools(first: $first, after: $after, where: { status: PUBLISH }) {
    pageInfo {
      hasNextPage
      endCursor
    }
    edges {
      cursor
      node {"""
    + TOOL_CARD_FIELDS
    + """      }
    }
  }
}
"""
)

LIST_CATEGORY_TOOLS = (
    """
query GetCategoryTools($first: Int!, $after: String, $category: String!) {
  aiTools(
    first: $first,
    after: $after,
    where: {
      status: PUBLISH,
      taxQuery: {
        taxArray: [
          { taxonomy: AI_TOOL_CATEGORY, field: SLUG, terms: [$category], operator: IN }
        ]
      }
    }
  ) {
    pageInfo {
      hasNextPage
      endCursor
    }
    edges {
      cursor
      node {"""
    + TOOL_CARD_FIELDS
    + """      }
    }
  }
}
"""
)

GET_TOOL = (
    """
query GetAITool($slug: ID!) {
  aiTool(id: $slug, idType: SLUG) {"""
    + TOOL_CARD_FIELDS
    + """    content
    affiliateLink
    modifiedGmt
  }
}
"""
)

GET_CATEGORY = """
query GetCategory($slug: ID!) {
  aiToolCategory(id: $slug, idType: SLUG) {
    id
    name
    description
    slug
    count
  }
}
"""

LIST_CATEGORIES = """
query GetCategories($first: Int!) {
  aiToolCategories(first: $first) {
    nodes {
      id
      name
      slug
      count
      description
    }
  }
}
"""

TOOL_STATS = """
query GetToolStats {
  aiTools(first: 1000) {
    nodes {
      id
    }
  }
  aiToolCategories(first: 1000) {
    nodes {
      id
    }
  }
}
"""

SEARCH_TOOLS = (
    """
query SearchAITools($search: String!, $first: Int!) {
  aiTools(first: $first, where: { search: $search, status: PUBLISH }) {
    nodes {"""
    + TOOL_CARD_FIELDS
    + """    }
  }
}
"""
)
