"""GraphQL documents used by the admin content search."""

from __future__ import annotations

import re

CONTENT_SEARCH_QUERY = """
  query SearchContent($searchTerm: String!, $limit: Int) {
    _Content(
      where: {
        _metadata: { types: { in: ["_Page"] } }
        _or: [
          { _fulltext: { match: $searchTerm } }
          { _metadata: { displayName: { contains: $searchTerm, boost: 10 } } }
        ]
      }
      limit: $limit
      orderBy: { _ranking: SEMANTIC, _modified: DESC }
    ) {
      items {
        _id
        _metadata {
          url {
            base
            default
          }
          key
          displayName
          types
          locale
        }
      }
      total
    }
  }
"""

_CONTENT_TYPE_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

_RECENT_CONTENT_TEMPLATE = """
  query RecentContent($limit: Int!) {{
    Content(
      limit: $limit
      orderBy: {{ Modified: DESC }}
      {where_clause}
    ) {{
      items {{
        _id
        Name
        ContentLink {{
          GuidValue
        }}
        ContentType
        Status
        Language {{
          Name
        }}
        Url
        Modified
        ... on PageData {{
          PageName
        }}
      }}
      total
    }}
  }}
"""


def is_valid_content_type(content_type: str) -> bool:
    return bool(_CONTENT_TYPE_PATTERN.match(content_type))


def recent_content_query(content_type: str | None = None) -> str:
    """Return the recent-content query, optionally filtered to one content type.

    The content type is inlined into the document, so only GraphQL identifier
    characters are accepted.
    """

    where_clause = ""
    if content_type:
        if not is_valid_content_type(content_type):
            raise ValueError(f"Invalid content type: {content_type}")
        where_clause = f'where: {{ ContentType: {{ eq: "{content_type}" }} }}'
    return _RECENT_CONTENT_TEMPLATE.format(where_clause=where_clause)
