"""
Fixtures compartilhadas: engine HTTP falsa, store em memória e HTML de exemplo
"""

from typing import Dict, List, Optional

import pytest

from sitemapfrog.core.config import CrawlConfig
from sitemapfrog.core.exceptions import UploadException
from sitemapfrog.core.http_engine import HTTPResponse

DOMAIN = "https://example.test"

REAL_PAGE = """<!DOCTYPE html>
<html>
<head><title>Car repair services | FixUp</title></head>
<body>
<main>
  <h1>Mechanic services</h1>
  {body}
</main>
</body>
</html>
"""

LISTING_PAGE = """<html>
<head><title>Services</title></head>
<body><main>
  <div class="service-card">Oil change</div>
  <div class="service-card">Brakes</div>
</main></body>
</html>
"""

PLACEHOLDER_PAGE = "<html><head><title>Loading</title></head><body><div id='root'></div></body></html>"

ERROR_PAGE = "<html><head><title>404 Not Found</title></head><body><main>Not here</main></body></html>"


def page(body: str = '') -> str:
    return REAL_PAGE.format(body=body)


def html_response(url: str, html: str, status: int = 200) -> HTTPResponse:
    return HTTPResponse(url=url, status=status, headers={'content-type': 'text/html; charset=utf-8'}, text=html)


def ok_head(url: str, content_type: str = 'text/html; charset=utf-8') -> HTTPResponse:
    return HTTPResponse(url=url, status=200, headers={'content-type': content_type})


def redirect_head(url: str, location: Optional[str], status: int = 301) -> HTTPResponse:
    headers = {'location': location} if location is not None else {}
    return HTTPResponse(url=url, status=status, headers=headers)


class FakeHTTPEngine:
    """Engine em memória: rotas HEAD/GET por URL, None para o resto"""

    def __init__(self, head_routes: Optional[Dict[str, HTTPResponse]] = None,
                 get_routes: Optional[Dict[str, HTTPResponse]] = None):
        self.head_routes = head_routes or {}
        self.get_routes = get_routes or {}
        self.head_calls: List[str] = []
        self.get_calls: List[str] = []

    def add_page(self, url: str, html: str) -> None:
        self.head_routes[url] = ok_head(url)
        self.get_routes[url] = html_response(url, html)

    async def head(self, url: str) -> Optional[HTTPResponse]:
        self.head_calls.append(url)
        return self.head_routes.get(url)

    async def get(self, url: str) -> Optional[HTTPResponse]:
        self.get_calls.append(url)
        return self.get_routes.get(url)


class FakeStore:
    """Store em memória com a interface do StorageUploader"""

    sitemap_key = 'sitemap.xml'
    index_key = 'sitemap-index.xml'

    def __init__(self, fail_on: Optional[str] = None):
        self.objects: Dict[str, str] = {}
        self.fail_on = fail_on

    async def upload(self, key: str, body: str) -> None:
        if key == self.fail_on:
            raise UploadException(f"Falha simulada em {key}", key=key, status_code=500)
        self.objects[key] = body

    async def download(self, key: str) -> Optional[str]:
        return self.objects.get(key)


@pytest.fixture
def config():
    """Config mínima: só a raiz como seed, sem fallback"""
    return CrawlConfig(
        domain=DOMAIN,
        seed_paths=('',),
        search_terms=(),
        pagination_seed_paths=(),
        min_urls_target=0,
        max_depth=2,
        min_content_length=2000,
    )


@pytest.fixture
def engine():
    return FakeHTTPEngine()


@pytest.fixture
def store():
    return FakeStore()
