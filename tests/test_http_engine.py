import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from sitemapfrog.core.http_engine import HTTPEngine, HTTPResponse, decode_body


def test_response_helpers():
    response = HTTPResponse(
        url='https://fixup.ge/a', status=301,
        headers={'content-type': 'text/html; charset=utf-8', 'location': '/b'},
    )
    assert response.is_redirect
    assert not response.ok
    assert response.content_type == 'text/html'
    assert response.location == '/b'


def test_decode_body():
    assert decode_body(b'') == ''
    assert decode_body('ხელოსანი'.encode('utf-8'), 'utf-8') == 'ხელოსანი'
    assert decode_body(b'caf\xe9', 'latin-1') == 'café'
    assert decode_body(b'\xff\xfe ok', 'no-such-charset').endswith(' ok')


def site_app() -> web.Application:
    async def old(request):
        raise web.HTTPMovedPermanently('/new')

    async def new(request):
        assert request.headers['User-Agent'] == 'FixUp-Sitemap-Crawler/1.0'
        return web.Response(text='<title>New</title>', content_type='text/html')

    app = web.Application()
    app.router.add_get('/old', old)
    app.router.add_get('/new', new)
    return app


@pytest.mark.asyncio
async def test_head_does_not_follow_and_get_does(config):
    server = TestServer(site_app())
    await server.start_server()
    base = f"http://{server.host}:{server.port}"
    try:
        async with HTTPEngine(config) as engine:
            head = await engine.head(f"{base}/old")
            assert head.status == 301
            assert head.location == '/new'

            get = await engine.get(f"{base}/old")
            assert get.status == 200
            assert get.url.endswith('/new')
            assert get.text == '<title>New</title>'
            assert get.content_type == 'text/html'

            missing = await engine.get(f"{base}/missing")
            assert missing.status == 404
    finally:
        await server.close()


@pytest.mark.asyncio
async def test_connection_error_returns_none(config):
    async with HTTPEngine(config.replace(timeout=2)) as engine:
        assert await engine.head('http://127.0.0.1:9/') is None
        assert await engine.get('http://127.0.0.1:9/') is None


@pytest.mark.asyncio
async def test_engine_requires_context(config):
    with pytest.raises(RuntimeError):
        await HTTPEngine(config).head('https://fixup.ge/')
