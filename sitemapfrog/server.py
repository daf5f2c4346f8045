"""
sitemapfrog/server.py
Transporte HTTP: dispara o crawl e serve o sitemap armazenado
"""

import asyncio
from datetime import date
from typing import Optional

from aiohttp import web

from sitemapfrog.core.config import CrawlConfig, StorageConfig
from sitemapfrog.core.crawler import SitemapCrawler
from sitemapfrog.core.exceptions import ConfigException
from sitemapfrog.exporters.storage import StorageUploader
from sitemapfrog.utils.logger import get_logger
from sitemapfrog.utils.urls import escape_xml

logger = get_logger('Server')

CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Headers': 'authorization, x-client-info, apikey, content-type',
}

CONFIG_KEY = web.AppKey('config', CrawlConfig)
STORE_KEY = web.AppKey('store', object)
HTTP_ENGINE_KEY = web.AppKey('http_engine', object)
CRAWL_LOCK_KEY = web.AppKey('crawl_lock', asyncio.Lock)


def fallback_sitemap(domain: str) -> str:
    """Sitemap mínimo (apenas a raiz) para quando o storage não responde"""
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">\n'
        '  <url>\n'
        f'    <loc>{escape_xml(domain)}/</loc>\n'
        f'    <lastmod>{date.today().isoformat()}</lastmod>\n'
        '    <changefreq>daily</changefreq>\n'
        '    <priority>1.0</priority>\n'
        '  </url>\n'
        '</urlset>\n'
    )


def _get_store(app: web.Application):
    store = app[STORE_KEY]
    if store is None:
        store = StorageUploader(StorageConfig.from_env())
        app[STORE_KEY] = store
    return store


async def handle_options(request: web.Request) -> web.Response:
    return web.Response(headers=CORS_HEADERS)


async def handle_crawl(request: web.Request) -> web.Response:
    app = request.app
    lock = app[CRAWL_LOCK_KEY]

    if lock.locked():
        return web.json_response(
            {'success': False, 'error': 'Crawl already running'},
            status=409, headers=CORS_HEADERS
        )

    async with lock:
        crawler = SitemapCrawler(app[CONFIG_KEY], http_engine=app[HTTP_ENGINE_KEY], store=app[STORE_KEY])
        try:
            summary = await crawler.run()
        except Exception as e:
            logger.error(f"❌ Erro no crawl-sitemap: {e}")
            return web.json_response({'success': False, 'error': str(e)}, status=500, headers=CORS_HEADERS)

    return web.json_response(summary, headers=CORS_HEADERS)


async def handle_sitemap(request: web.Request) -> web.Response:
    app = request.app
    config = app[CONFIG_KEY]

    xml_content: Optional[str] = None
    try:
        store = _get_store(app)
        xml_content = await store.download(store.sitemap_key)
    except ConfigException as e:
        logger.warning(f"Storage não configurado: {e}")

    if xml_content is None:
        logger.info("Sitemap ausente no storage, servindo fallback")
        return web.Response(
            text=fallback_sitemap(config.domain),
            content_type='application/xml',
            headers={'Cache-Control': 'public, max-age=60'},
        )

    return web.Response(
        text=xml_content,
        content_type='application/xml',
        headers={'Cache-Control': 'public, max-age=3600'},
    )


def create_app(config: Optional[CrawlConfig] = None, store=None, http_engine=None) -> web.Application:
    """
    Cria a aplicação aiohttp

    Args:
        config: Configuração do crawl (default: CrawlConfig())
        store: Destino dos XMLs (default: StorageUploader via ambiente)
        http_engine: Engine HTTP injetada (default: uma por execução)
    """
    app = web.Application()
    app[CONFIG_KEY] = config or CrawlConfig()
    app[STORE_KEY] = store
    app[HTTP_ENGINE_KEY] = http_engine
    app[CRAWL_LOCK_KEY] = asyncio.Lock()

    app.router.add_route('OPTIONS', '/crawl-sitemap', handle_options)
    app.router.add_post('/crawl-sitemap', handle_crawl)
    app.router.add_get('/crawl-sitemap', handle_crawl)
    app.router.add_get('/sitemap.xml', handle_sitemap)
    return app


def run_server(config: Optional[CrawlConfig] = None, host: str = '0.0.0.0', port: int = 8080, store=None) -> None:
    logger.info(f"🌐 Servindo em http://{host}:{port} (POST /crawl-sitemap, GET /sitemap.xml)")
    web.run_app(create_app(config, store=store), host=host, port=port, print=None)
