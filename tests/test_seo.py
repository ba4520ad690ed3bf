from datetime import date

from staticblocks.seo import (
    SitemapEntry,
    inject_meta_tags,
    meta_tags,
    robots_txt,
    sitemap_entries,
    sitemap_xml,
)

CONFIG = {
    "meta": {"siteUrl": "https://example.com", "twitterHandle": "@blocks"},
    "i18n": {
        "defaultLocale": "en",
        "locales": ["en", "de"],
        "strategy": "prefix_except_default",
    },
}


def test_meta_tags_full_page():
    page = {
        "title": 'Tom & "Jerry"',
        "meta": {
            "description": "About us",
            "keywords": ["a", "b"],
            "image": "/img/og.png",
            "noindex": True,
        },
    }
    tags = meta_tags(page, CONFIG, "about", "/de")
    assert '<meta name="description" content="About us">' in tags
    assert '<meta name="keywords" content="a, b">' in tags
    assert '<meta property="og:title" content="Tom &amp; &quot;Jerry&quot;">' in tags
    assert '<meta property="og:image" content="/img/og.png">' in tags
    assert '<meta property="og:url" content="https://example.com/de/about">' in tags
    assert '<meta name="twitter:site" content="@blocks">' in tags
    assert '<link rel="canonical" href="https://example.com/de/about">' in tags
    assert '<meta name="robots" content="noindex, nofollow">' in tags


def test_meta_tags_index_and_explicit_canonical():
    tags = meta_tags({"title": "Home"}, CONFIG, "index", "")
    assert '<meta property="og:url" content="https://example.com">' in tags
    assert '<link rel="canonical" href="https://example.com">' in tags
    assert not any("og:title" in tag for tag in tags)

    page = {"title": "Docs", "meta": {"canonical": "https://other.org/docs"}}
    tags = meta_tags(page, CONFIG, "docs/index", "")
    assert '<meta property="og:url" content="https://example.com/docs">' in tags
    assert '<link rel="canonical" href="https://other.org/docs">' in tags


def test_meta_tags_without_site_meta():
    assert meta_tags({"title": "x"}, {}, "about") == []


def test_inject_meta_tags():
    html = "<html><head><title>x</title></head></html>"
    result = inject_meta_tags(html, ['<meta name="a" content="b">'])
    assert result == '<html><head>\n  <meta name="a" content="b"><title>x</title></head></html>'
    assert inject_meta_tags(html, []) == html
    assert inject_meta_tags("<p>no head</p>", ["<meta>"]) == "<p>no head</p>"


def test_sitemap_entries_per_locale():
    entries = sitemap_entries(["index", "about"], CONFIG, today=date(2024, 5, 1))
    assert [e.url for e in entries] == [
        "https://example.com/",
        "https://example.com/de/",
        "https://example.com/about/",
        "https://example.com/de/about/",
    ]
    assert entries[0].priority == 1.0
    assert entries[2].priority == 0.8
    assert entries[0].lastmod == "2024-05-01"


def test_sitemap_entries_prefix_strategy_and_no_i18n():
    config = {
        "meta": {"siteUrl": "https://example.com/"},
        "i18n": {"defaultLocale": "en", "locales": ["en"], "strategy": "prefix"},
    }
    assert [e.url for e in sitemap_entries(["index"], config)] == ["https://example.com/en/"]
    no_i18n = {"meta": {"siteUrl": "https://example.com"}}
    assert [e.url for e in sitemap_entries(["about"], no_i18n)] == ["https://example.com/about/"]
    assert sitemap_entries(["about"], {}) == []


def test_sitemap_xml():
    xml = sitemap_xml([SitemapEntry(url="https://example.com/?a=1&b=2", lastmod="2024-05-01", priority=0.8)])
    assert xml.startswith('<?xml version="1.0" encoding="UTF-8"?>')
    assert "<loc>https://example.com/?a=1&amp;b=2</loc>" in xml
    assert "<lastmod>2024-05-01</lastmod>" in xml
    assert "<changefreq>weekly</changefreq>" in xml
    assert "<priority>0.8</priority>" in xml
    assert xml.rstrip().endswith("</urlset>")


def test_robots_txt():
    assert "Sitemap: https://example.com/sitemap.xml" in robots_txt(CONFIG)
    content = robots_txt({})
    assert "User-agent: *" in content
    assert "# No sitemap URL configured" in content
