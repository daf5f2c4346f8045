import pytest
from aiohttp.test_utils import TestClient, TestServer

from sitemapfrog.server import create_app, fallback_sitemap

from tests.conftest import DOMAIN, FakeHTTPEngine, FakeStore, page


def small_site() -> FakeHTTPEngine:
    engine = FakeHTTPEngine()
    engine.add_page(f"{DOMAIN}/", page('<a href="/about">About</a>'))
    engine.add_page(f"{DOMAIN}/about", page())
    return engine


async def make_client(app) -> TestClient:
    client = TestClient(TestServer(app))
    await client.start_server()
    return client


@pytest.mark.asyncio
async def test_options_returns_cors_headers(config):
    client = await make_client(create_app(config, store=FakeStore(), http_engine=small_site()))
    try:
        response = await client.options('/crawl-sitemap')
        assert response.status == 200
        assert response.headers['Access-Control-Allow-Origin'] == '*'
        assert response.headers['Access-Control-Allow-Headers'] == 'authorization, x-client-info, apikey, content-type'
        assert await response.text() == ''
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_crawl_returns_summary(config):
    store = FakeStore()
    client = await make_client(create_app(config, store=store, http_engine=small_site()))
    try:
        response = await client.post('/crawl-sitemap')
        assert response.status == 200
        assert response.headers['Access-Control-Allow-Origin'] == '*'

        body = await response.json()
        assert body['success'] is True
        assert body['totalUrls'] == 2
        assert body['breakdown']['processed'] == 2
        assert 'sitemap.xml' in store.objects
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_crawl_failure_returns_500(config):
    client = await make_client(create_app(config, store=FakeStore(fail_on='sitemap.xml'), http_engine=small_site()))
    try:
        response = await client.post('/crawl-sitemap')
        assert response.status == 500

        body = await response.json()
        assert body['success'] is False
        assert 'sitemap.xml' in body['error']
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_serves_stored_sitemap(config):
    store = FakeStore()
    store.objects['sitemap.xml'] = '<urlset>stored</urlset>'
    client = await make_client(create_app(config, store=store))
    try:
        response = await client.get('/sitemap.xml')
        assert response.status == 200
        assert response.headers['Content-Type'].startswith('application/xml')
        assert response.headers['Cache-Control'] == 'public, max-age=3600'
        assert await response.text() == '<urlset>stored</urlset>'
    finally:
        await client.close()


@pytest.mark.asyncio
async def test_missing_sitemap_serves_fallback(config, monkeypatch):
    monkeypatch.delenv('SUPABASE_URL', raising=False)
    monkeypatch.delenv('SUPABASE_SERVICE_ROLE_KEY', raising=False)
    client = await make_client(create_app(config))
    try:
        response = await client.get('/sitemap.xml')
        assert response.status == 200
        assert response.headers['Cache-Control'] == 'public, max-age=60'
        text = await response.text()
        assert f"<loc>{DOMAIN}/</loc>" in text
        assert text.count('<url>') == 1
    finally:
        await client.close()


def test_fallback_sitemap_escapes_domain():
    assert '<loc>https://a.test/?x=1&amp;y=2/</loc>' in fallback_sitemap('https://a.test/?x=1&y=2')
