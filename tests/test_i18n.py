import itertools

import pytest

from staticblocks.engine import TemplateEngine
from staticblocks.i18n import (
    LocaleConfig,
    Strategy,
    asset_url,
    clean_slug,
    locale_prefix,
    localize_url,
    output_path,
    page_url,
)


def test_locale_prefix_strategies():
    assert locale_prefix("en", "en", "prefix_except_default") == ""
    assert locale_prefix("de", "en", "prefix_except_default") == "/de"
    assert locale_prefix("en", "en", "prefix") == "/en"
    assert locale_prefix("de", "en", Strategy.PREFIX) == "/de"


def test_locale_prefix_disabled():
    assert locale_prefix("de", "en", "prefix", i18n_enabled=False) == ""


def test_locale_config_from_config():
    config = {
        "i18n": {"defaultLocale": "en", "locales": ["en", "de"], "strategy": "prefix"}
    }
    i18n = LocaleConfig.from_config(config)
    assert i18n == LocaleConfig("en", ("en", "de"), Strategy.PREFIX)
    assert i18n.prefix_for("en") == "/en"


def test_locale_config_defaults():
    i18n = LocaleConfig.from_config({"i18n": {"defaultLocale": "fr"}})
    assert i18n.locales == ("fr",)
    assert i18n.strategy is Strategy.PREFIX_EXCEPT_DEFAULT
    assert i18n.prefix_for("fr") == ""
    assert LocaleConfig.from_config({"i18n": {}}).default_locale == "de"


def test_locale_config_disabled():
    assert LocaleConfig.from_config({}) is None
    assert LocaleConfig.from_config({"i18n": None}) is None
    assert LocaleConfig.from_config(None) is None


def test_localize_url():
    assert localize_url("/about/", prefix="/de") == "/de/about"
    assert localize_url("about", prefix="/de") == "/de/about"
    assert localize_url("/contact") == "/contact"
    assert localize_url("/about", base_url="https://example.com", prefix="/de") == (
        "https://example.com/de/about"
    )


def test_localize_url_root_never_prefixed():
    bases = ["", "https://example.com", "https://example.com/"]
    prefixes = ["", "/de", "/en"]
    for base, prefix in itertools.product(bases, prefixes):
        expected = "https://example.com/" if base else "/"
        assert localize_url("/", base_url=base, prefix=prefix) == expected
        assert localize_url("", base_url=base, prefix=prefix) == expected


def test_localize_url_does_not_inspect_locale_segments():
    assert localize_url("/de/about") == "/de/about"
    assert localize_url("/fr/contact", prefix="/de") == "/de/fr/contact"


def test_asset_url():
    assert asset_url("img/a.png") == "/img/a.png"
    assert asset_url("/img/a.png", "https://cdn.example.com") == "https://cdn.example.com/img/a.png"


def test_output_path():
    assert output_path("index") == "index.html"
    assert output_path("about", "en", "en") == "about/index.html"
    assert output_path("about", "de", "en") == "de/about/index.html"
    assert output_path("index", "de", "en") == "de/index.html"
    assert output_path("blog/post", "de", "en") == "de/blog/post/index.html"


def test_page_url_and_clean_slug():
    assert page_url("index") == "/"
    assert page_url("index", "/de") == "/de/"
    assert page_url("docs/index") == "/docs/"
    assert page_url("blog/post", "/en") == "/en/blog/post/"
    assert clean_slug("index") == ""
    assert clean_slug("docs/index") == "docs"


def _context(strategy, locale, default="en"):
    config = {
        "i18n": {"defaultLocale": default, "locales": ["en", "de", "fr"], "strategy": strategy}
    }
    return {
        "config": config,
        "currentLang": locale,
        "langPrefix": locale_prefix(locale, default, strategy),
        "baseUrl": "",
    }


@pytest.mark.parametrize("strategy", ["prefix", "prefix_except_default"])
@pytest.mark.parametrize("locale", ["en", "de", "fr"])
def test_url_helper_root_for_every_strategy(strategy, locale):
    engine = TemplateEngine()
    assert engine.render("{{url:/}}", _context(strategy, locale)) == "/"


def test_url_helper_prefix_strategy():
    engine = TemplateEngine()
    assert engine.render("{{url:/about}}", _context("prefix", "en")) == "/en/about"
    assert engine.render("{{url:/about}}", _context("prefix", "de")) == "/de/about"


def test_url_helper_prefix_except_default_strategy():
    engine = TemplateEngine()
    assert engine.render("{{url:/contact}}", _context("prefix_except_default", "en")) == "/contact"
    assert engine.render("{{url:/about/}}", _context("prefix_except_default", "de")) == "/de/about"
    assert engine.render("{{url:about}}", _context("prefix_except_default", "de")) == "/de/about"


def test_url_helper_with_base_url():
    engine = TemplateEngine()
    context = _context("prefix_except_default", "de")
    context["baseUrl"] = "https://example.com/"
    assert engine.render("{{url:/}}", context) == "https://example.com/"
    context["baseUrl"] = "https://example.com"
    assert engine.render("{{url:/about}}", context) == "https://example.com/de/about"


def test_url_helper_without_i18n():
    engine = TemplateEngine()
    assert engine.render("{{url:/about}}", {"config": {}, "baseUrl": ""}) == "/about"
    assert engine.render("{{url:/}}", {"config": {}, "baseUrl": ""}) == "/"
