import pytest

from sitemapfrog.core.http_engine import HTTPResponse
from sitemapfrog.parsers.content_parser import (
    ContentValidator, has_domain_keywords, has_listing_cards, has_main_content, has_meaningful_title
)

from tests.conftest import (
    DOMAIN, ERROR_PAGE, LISTING_PAGE, PLACEHOLDER_PAGE, FakeHTTPEngine, html_response, page
)


class TestSignals:

    def test_title(self):
        assert has_meaningful_title("<title>Mechanics in Tbilisi</title>")
        assert not has_meaningful_title("<title>   </title>")
        assert not has_meaningful_title("<title>Page not found</title>")
        assert not has_meaningful_title("<title>გვერდი ვერ მოიძებნა</title>")
        assert not has_meaningful_title("<p>no title</p>")

    def test_main_content(self):
        assert has_main_content("<main>x</main>", 2000)
        assert has_main_content('<div role="main">x</div>', 2000)
        assert has_main_content('<div id="content">x</div>', 2000)
        assert has_main_content("x" * 2000, 2000)
        assert not has_main_content("<div>x</div>", 2000)

    def test_keywords(self):
        assert has_domain_keywords("<p>ხელოსანი</p>", ('ხელოსანი',))
        assert has_domain_keywords("<p>FixUp</p>", ('fixup',))
        assert not has_domain_keywords("<p>hello</p>", ('fixup',))

    def test_listing_cards(self):
        assert has_listing_cards(LISTING_PAGE)
        assert not has_listing_cards(page())


class TestContentValidator:

    def test_real_page_accepted(self, config):
        validator = ContentValidator(FakeHTTPEngine(), config)
        assert validator.is_real_html(f"{DOMAIN}/about", page())

    def test_placeholder_rejected(self, config):
        validator = ContentValidator(FakeHTTPEngine(), config)
        assert not validator.is_real_html(f"{DOMAIN}/service/1", PLACEHOLDER_PAGE)

    def test_error_title_rejected(self, config):
        validator = ContentValidator(FakeHTTPEngine(), config)
        assert not validator.is_real_html(f"{DOMAIN}/x", ERROR_PAGE)

    def test_paginated_page_needs_cards(self, config):
        validator = ContentValidator(FakeHTTPEngine(), config)
        assert validator.is_real_html(f"{DOMAIN}/services?page=2", LISTING_PAGE)
        assert not validator.is_real_html(f"{DOMAIN}/services?page=2", page())

    @pytest.mark.asyncio
    async def test_is_real_content_is_idempotent(self, config):
        url = f"{DOMAIN}/about"
        engine = FakeHTTPEngine(get_routes={url: html_response(url, page())})
        validator = ContentValidator(engine, config)

        assert await validator.is_real_content(url) is True
        assert await validator.is_real_content(url) is True

    @pytest.mark.asyncio
    async def test_non_html_rejected(self, config):
        url = f"{DOMAIN}/feed"
        response = HTTPResponse(url=url, status=200, headers={'content-type': 'application/json'}, text='{"car": 1}')
        validator = ContentValidator(FakeHTTPEngine(get_routes={url: response}), config)

        assert await validator.is_real_content(url) is False

    @pytest.mark.asyncio
    async def test_fetch_failure_rejected(self, config):
        validator = ContentValidator(FakeHTTPEngine(), config)

        assert await validator.is_real_content(f"{DOMAIN}/timeout") is False

    @pytest.mark.asyncio
    async def test_excluded_url_not_fetched(self, config):
        engine = FakeHTTPEngine()
        validator = ContentValidator(engine, config)

        assert await validator.is_real_content(f"{DOMAIN}/admin/panel") is False
        assert engine.get_calls == []


GEORGIAN_PAGE = "<html><head><title>ინფო</title></head><body><div>" + "ა" * 900 + "</div></body></html>"


def test_size_threshold_counts_utf8_bytes(config):
    assert len(GEORGIAN_PAGE) < config.min_content_length <= len(GEORGIAN_PAGE.encode('utf-8'))
    assert has_main_content(GEORGIAN_PAGE, config.min_content_length)


@pytest.mark.asyncio
async def test_long_georgian_page_is_real_content(config):
    url = f"{DOMAIN}/info"
    validator = ContentValidator(FakeHTTPEngine(get_routes={url: html_response(url, GEORGIAN_PAGE)}), config)

    assert await validator.is_real_content(url) is True


@pytest.mark.parametrize('title, expected', [
    ('Top 500 mechanics in Tbilisi', True),
    ('404 services near you', True),
    ('404', False),
    ('500 | FixUp', False),
    ('404 - Page', False),
    ('Internal Server Error', False),
])
def test_status_codes_in_titles(title, expected):
    assert has_meaningful_title(f"<title>{title}</title>") is expected
