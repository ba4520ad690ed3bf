"""HTML utility functions for StaticBlocks.

This module provides the string-level HTML helpers shared by the template
helpers, the SEO module and the page builder.

Functions:
    escape_html: Escape special HTML characters in a string.
    escape_template_tags: Neutralize ``{{``/``}}`` so text cannot become a tag.
    escape_xml: Escape text for XML documents such as sitemaps.
    join_root_url: Join a base URL with a path.
"""

from __future__ import annotations

_TEMPLATE_OPEN = "{{"
_TEMPLATE_CLOSE = "}}"


def escape_html(text: str) -> str:
    """Escape special HTML characters in a string.

    Converts the following characters to their HTML entity equivalents:
    - & becomes &amp;
    - < becomes &lt;
    - > becomes &gt;
    - " becomes &quot;
    - ' becomes &#39;

    Args:
        text: The string to escape.

    Returns:
        The escaped string, safe for inclusion in HTML.

    Examples:
        >>> escape_html('<script>alert("XSS")</script>')
        '&lt;script&gt;alert(&quot;XSS&quot;)&lt;/script&gt;'

        >>> escape_html("Tom & Jerry's")
        'Tom &amp; Jerry&#39;s'
    """
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#39;")
    )


def escape_template_tags(text: str) -> str:
    """Replace template delimiters with numeric character references.

    Examples:
        >>> escape_template_tags("{{title}}")
        '&#123;&#123;title&#125;&#125;'
    """
    return text.replace(_TEMPLATE_OPEN, "&#123;&#123;").replace(
        _TEMPLATE_CLOSE, "&#125;&#125;"
    )


def escape_xml(text: str) -> str:
    """Escape special XML characters in a string."""
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
    )


def join_root_url(root_url: str, path: str) -> str:
    """Safely join a root URL and a path, avoiding double slashes.

    Args:
        root_url: Base URL (e.g., https://example.com/blog).
        path: Path beginning with or without a leading slash.

    Returns:
        Combined URL with proper slash handling.

    Examples:
        >>> join_root_url('https://example.com', '/about')
        'https://example.com/about'

        >>> join_root_url('https://example.com/', 'about')
        'https://example.com/about'
    """
    if not root_url:
        return path
    base = root_url.rstrip("/")
    suffix = path if path.startswith("/") else f"/{path}"
    return f"{base}{suffix}"
