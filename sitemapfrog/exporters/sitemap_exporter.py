"""
sitemapfrog/exporters/sitemap_exporter.py
Geração do sitemap.xml (urlset) e do sitemap-index.xml
"""

from datetime import date
from typing import Iterable, List, Optional, Tuple
from urllib.parse import urlparse

from sitemapfrog.core.models import CrawlResult
from sitemapfrog.parsers.base import is_html_content_type
from sitemapfrog.utils.logger import get_logger
from sitemapfrog.utils.urls import escape_xml

SITEMAP_NAMESPACE = 'http://www.sitemaps.org/schemas/sitemap/0.9'

PRIMARY_LISTINGS = {'/services', '/mechanics', '/mechanic'}
SECONDARY_LISTINGS = {'/search', '/service-search', '/laundries', '/category'}
SEARCH_PAGES = {'/search', '/service-search'}
DETAIL_PREFIXES = ('/service/', '/mechanic/')
CATEGORY_PREFIXES = ('/category/', '/services/')
STATIC_PAGES = {'/about', '/contact'}

MIN_PRIORITY = 0.1
MAX_PRIORITY = 1.0
DEPTH_PENALTY = 0.1


def _path_of(url: str) -> str:
    path = urlparse(url).path or '/'
    if len(path) > 1:
        path = path.rstrip('/')
    return path


def base_priority(url: str) -> float:
    """Prioridade base pelo formato do path"""
    path = _path_of(url)

    if path == '/':
        return 1.0
    if path in PRIMARY_LISTINGS:
        return 0.9
    if path in SECONDARY_LISTINGS:
        return 0.8
    if path.startswith(DETAIL_PREFIXES):
        return 0.8
    if path.startswith(CATEGORY_PREFIXES):
        return 0.7
    if path in STATIC_PAGES:
        return 0.6
    return 0.5


def calculate_priority(url: str, depth: int) -> float:
    """Prioridade base reduzida em 0.1 por nível de profundidade, mínimo 0.1"""
    priority = base_priority(url) - DEPTH_PENALTY * max(depth, 0)
    return round(min(MAX_PRIORITY, max(MIN_PRIORITY, priority)), 1)


def calculate_changefreq(url: str) -> str:
    path = _path_of(url)

    if path == '/' or path in PRIMARY_LISTINGS or path in SEARCH_PAGES:
        return 'daily'
    if path.startswith(DETAIL_PREFIXES) or path.startswith(CATEGORY_PREFIXES):
        return 'weekly'
    if path in STATIC_PAGES:
        return 'monthly'
    return 'weekly'


class SitemapExporter:
    """Converte os resultados válidos nos dois documentos XML"""

    def __init__(self, sitemap_url: str):
        self.sitemap_url = sitemap_url
        self.logger = get_logger('SitemapExporter')

    def select_results(self, results: Iterable[CrawlResult]) -> List[CrawlResult]:
        """Remove resultados com content-type conhecido e não HTML; ordena por URL final"""
        selected = []
        for result in results:
            if result.content_type and not is_html_content_type(result.content_type):
                self.logger.debug(f"Ignorando {result.final_url} ({result.content_type})")
                continue
            selected.append(result)
        return sorted(selected, key=lambda r: r.final_url)

    def build_sitemap(self, results: Iterable[CrawlResult]) -> str:
        lines = [
            '<?xml version="1.0" encoding="UTF-8"?>',
            f'<urlset xmlns="{SITEMAP_NAMESPACE}">',
        ]

        for result in self.select_results(results):
            priority = calculate_priority(result.final_url, result.depth)
            lines.extend([
                '  <url>',
                f'    <loc>{escape_xml(result.final_url)}</loc>',
                f'    <lastmod>{escape_xml(result.lastmod)}</lastmod>',
                f'    <changefreq>{calculate_changefreq(result.final_url)}</changefreq>',
                f'    <priority>{priority:.1f}</priority>',
                '  </url>',
            ])

        lines.append('</urlset>')
        return '\n'.join(lines) + '\n'

    def build_sitemap_index(self, lastmod: Optional[str] = None) -> str:
        lastmod = lastmod or date.today().isoformat()
        return (
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            f'<sitemapindex xmlns="{SITEMAP_NAMESPACE}">\n'
            '  <sitemap>\n'
            f'    <loc>{escape_xml(self.sitemap_url)}</loc>\n'
            f'    <lastmod>{escape_xml(lastmod)}</lastmod>\n'
            '  </sitemap>\n'
            '</sitemapindex>\n'
        )

    def emit(self, results: Iterable[CrawlResult]) -> Tuple[str, str]:
        """Retorna (sitemap_xml, sitemap_index_xml)"""
        results = list(results)
        sitemap_xml = self.build_sitemap(results)
        index_xml = self.build_sitemap_index()
        self.logger.info(f"🗺️ Sitemap gerado: {len(self.select_results(results))} URLs")
        return sitemap_xml, index_xml
