"""SEO output for StaticBlocks.

This module produces the search-engine facing parts of a build: meta tags
injected into each page's ``<head>``, ``sitemap.xml`` and ``robots.txt``.
All functions return strings; writing files is left to the builder.

Key functions:
- meta_tags: Meta/link tags for one rendered page.
- inject_meta_tags: Insert tags right after ``<head>``.
- sitemap_entries / sitemap_xml: Sitemap for every page and locale.
- robots_txt: robots.txt content.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date
from typing import Any

from .html_utils import escape_html, escape_xml
from .i18n import LocaleConfig, page_url


@dataclass
class SitemapEntry:
    """A single ``<url>`` element of the sitemap.

    Attributes:
        url: Absolute page URL.
        lastmod: Last modification date (YYYY-MM-DD).
        changefreq: Expected change frequency.
        priority: Relative priority between 0.0 and 1.0.
    """

    url: str
    lastmod: str | None = None
    changefreq: str | None = "weekly"
    priority: float | None = None


def _site_url(config: Mapping[str, Any]) -> str:
    meta = config.get("meta") or {}
    return str(meta.get("siteUrl") or "").rstrip("/")


def _page_address(site_url: str, slug: str, lang_prefix: str) -> str:
    return site_url + page_url(slug, lang_prefix or "").rstrip("/")


def meta_tags(
    page: Mapping[str, Any],
    config: Mapping[str, Any],
    slug: str,
    lang_prefix: str = "",
) -> list[str]:
    """Build the meta and link tags for a page.

    Args:
        page: Page configuration (``title`` and optional ``meta`` section).
        config: Project configuration (optional ``meta`` section).
        slug: Page slug.
        lang_prefix: Locale URL prefix of the rendered page.

    Returns:
        List of HTML tags in document order.
    """
    meta = page.get("meta") or {}
    site_url = _site_url(config)
    twitter_handle = (config.get("meta") or {}).get("twitterHandle")
    description = meta.get("description")
    tags: list[str] = []

    if description:
        tags.append(f'<meta name="description" content="{escape_html(str(description))}">')
    keywords = meta.get("keywords") or []
    if keywords:
        joined = ", ".join(str(keyword) for keyword in keywords)
        tags.append(f'<meta name="keywords" content="{escape_html(joined)}">')
    if description:
        title = escape_html(str(page.get("title") or ""))
        tags.append(f'<meta property="og:title" content="{title}">')
        tags.append(
            f'<meta property="og:description" content="{escape_html(str(description))}">'
        )
    if meta.get("image"):
        tags.append(f'<meta property="og:image" content="{escape_html(str(meta["image"]))}">')
    if site_url:
        address = escape_html(_page_address(site_url, slug, lang_prefix))
        tags.append(f'<meta property="og:url" content="{address}">')
    if twitter_handle:
        tags.append('<meta name="twitter:card" content="summary_large_image">')
        tags.append(
            f'<meta name="twitter:site" content="{escape_html(str(twitter_handle))}">'
        )
    if site_url:
        canonical = meta.get("canonical") or _page_address(site_url, slug, lang_prefix)
        tags.append(f'<link rel="canonical" href="{escape_html(str(canonical))}">')
    if meta.get("noindex"):
        tags.append('<meta name="robots" content="noindex, nofollow">')
    return tags


def inject_meta_tags(template: str, tags: Iterable[str]) -> str:
    """Insert tags after the first ``<head>`` of a template.

    Templates without a ``<head>`` are returned unchanged.
    """
    block = "".join(f"\n  {tag}" for tag in tags)
    if not block:
        return template
    return template.replace("<head>", f"<head>{block}", 1)


def sitemap_entries(
    slugs: Iterable[str], config: Mapping[str, Any], today: date | None = None
) -> list[SitemapEntry]:
    """Collect one sitemap entry per page and locale.

    Args:
        slugs: Slugs of all pages.
        config: Project configuration.
        today: Date used for ``lastmod``; defaults to today.

    Returns:
        Entries in page order, locales in configured order. Empty when the
        project has no ``meta.siteUrl``.
    """
    site_url = _site_url(config)
    if not site_url:
        return []
    lastmod = (today or date.today()).isoformat()
    i18n = LocaleConfig.from_config(config)
    locales: tuple[str | None, ...] = i18n.locales if i18n else (None,)
    entries: list[SitemapEntry] = []
    for slug in slugs:
        for locale in locales:
            prefix = i18n.prefix_for(locale) if i18n and locale else ""
            entries.append(
                SitemapEntry(
                    url=site_url + page_url(slug, prefix),
                    lastmod=lastmod,
                    priority=1.0 if slug == "index" else 0.8,
                )
            )
    return entries


def sitemap_xml(entries: Iterable[SitemapEntry]) -> str:
    """Render sitemap entries as a sitemap.xml document."""
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">',
    ]
    for entry in entries:
        parts = [f"<loc>{escape_xml(entry.url)}</loc>"]
        if entry.lastmod:
            parts.append(f"<lastmod>{entry.lastmod}</lastmod>")
        if entry.changefreq:
            parts.append(f"<changefreq>{entry.changefreq}</changefreq>")
        if entry.priority is not None:
            parts.append(f"<priority>{entry.priority}</priority>")
        lines.append(f"  <url>{''.join(parts)}</url>")
    lines.append("</urlset>")
    return "\n".join(lines) + "\n"


def robots_txt(config: Mapping[str, Any]) -> str:
    """Return robots.txt content allowing all crawlers."""
    site_url = _site_url(config)
    sitemap_line = (
        f"Sitemap: {site_url}/sitemap.xml" if site_url else "# No sitemap URL configured"
    )
    return "\n".join(
        [
            "# StaticBlocks - Robots.txt",
            "User-agent: *",
            "Allow: /",
            "",
            "# Sitemaps",
            sitemap_line,
            "",
        ]
    )
