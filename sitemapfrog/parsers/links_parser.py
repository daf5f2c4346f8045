"""
sitemapfrog/parsers/links_parser.py
Extração de links candidatos a partir do HTML bruto

Cada heurística é uma função independente que recebe o markup (ou a URL)
e devolve uma lista de hrefs brutos; o LinkExtractor resolve, filtra e
etiqueta os candidatos.
"""

import re
from typing import List
from urllib.parse import urljoin, urlparse, urlunparse, parse_qsl, urlencode

from sitemapfrog.core.config import CrawlConfig
from sitemapfrog.core.models import (
    QueueItem, SOURCE_HREF, SOURCE_SCRIPT_PATH, SOURCE_DATA_ATTRIBUTE, SOURCE_PAGINATION
)
from sitemapfrog.parsers.base import ParserMixin, make_soup, is_html_content_type
from sitemapfrog.utils.urls import (
    get_page_number, is_internal_url, is_valid_page_url, normalize_url
)

IGNORED_HREF_PREFIXES = ('#', 'mailto:', 'tel:', 'javascript:', 'data:')

LINK_RELS = {'canonical', 'alternate', 'next', 'prev'}

# Strings entre aspas que parecem paths root-relative sem extensão: '/service/12'
SCRIPT_PATH_PATTERN = re.compile(r'''(["'`])(/[A-Za-z0-9\-_~%]+(?:/[A-Za-z0-9\-_~%]+)*/?)\1''')

MAX_PAGINATION_PAGE = 10
PAGINATION_LOOKAHEAD = 3


def _is_ignored_href(href: str) -> bool:
    return not href or href.lower().startswith(IGNORED_HREF_PREFIXES)


def extract_href_links(html: str) -> List[str]:
    """Hrefs de <a>, <area> e <link rel=canonical|alternate|next|prev>"""
    soup = make_soup(html)
    hrefs = []

    for tag in soup.find_all(['a', 'area'], href=True):
        href = tag['href'].strip()
        if not _is_ignored_href(href):
            hrefs.append(href)

    for tag in soup.find_all('link', href=True):
        rels = {rel.lower() for rel in (tag.get('rel') or [])}
        href = tag['href'].strip()
        if rels & LINK_RELS and not _is_ignored_href(href):
            hrefs.append(href)

    return hrefs


def extract_script_paths(html: str) -> List[str]:
    """Literais entre aspas com cara de rota client-side (ex: "/mechanic/42")"""
    return [match.group(2) for match in SCRIPT_PATH_PATTERN.finditer(html or '')]


def extract_data_attribute_links(html: str) -> List[str]:
    """Valores de atributos data-* que contêm '/'"""
    soup = make_soup(html)
    values = []

    for tag in soup.find_all(True):
        for name, value in tag.attrs.items():
            if not name.lower().startswith('data-') or not isinstance(value, str):
                continue
            value = value.strip()
            if '/' in value and not any(ch.isspace() for ch in value) and not _is_ignored_href(value):
                values.append(value)

    return values


def extract_pagination_links(url: str) -> List[str]:
    """
    Se a URL já tem ?page=N, sintetiza as páginas irmãs 1..min(N+3, 10)

    Example:
        >>> extract_pagination_links("https://fixup.ge/services?page=2")
        ['https://fixup.ge/services?page=1', 'https://fixup.ge/services?page=3', ...]
    """
    current_page = get_page_number(url)
    if current_page is None:
        return []

    parsed = urlparse(url)
    other_params = [(k, v) for k, v in parse_qsl(parsed.query, keep_blank_values=True) if k != 'page']
    last_page = min(current_page + PAGINATION_LOOKAHEAD, MAX_PAGINATION_PAGE)

    pages = []
    for page in range(1, last_page + 1):
        if page == current_page:
            continue
        query = urlencode(other_params + [('page', str(page))])
        pages.append(urlunparse(parsed._replace(query=query, fragment='')))
    return pages


class LinkExtractor(ParserMixin):
    """Busca o corpo de uma página e aplica as quatro heurísticas de links"""

    def __init__(self, http_engine, config: CrawlConfig):
        super().__init__()
        self.http_engine = http_engine
        self.config = config

    def candidates_from_html(self, final_url: str, html: str, depth: int) -> List[QueueItem]:
        """Aplica as heurísticas sobre HTML já obtido (sem I/O)"""
        passes = (
            (SOURCE_HREF, extract_href_links(html)),
            (SOURCE_SCRIPT_PATH, extract_script_paths(html)),
            (SOURCE_DATA_ATTRIBUTE, extract_data_attribute_links(html)),
            (SOURCE_PAGINATION, extract_pagination_links(final_url)),
        )

        items = []
        seen = set()
        for source, raw_links in passes:
            for raw in raw_links:
                try:
                    absolute = urljoin(final_url, raw)
                except ValueError:
                    continue

                if not is_internal_url(absolute, self.config.domain) or not is_valid_page_url(absolute):
                    continue

                url = normalize_url(absolute)
                if url in seen:
                    continue
                seen.add(url)
                items.append(QueueItem(url=url, depth=depth, source=source))

        return items

    async def extract(self, final_url: str, depth: int) -> List[QueueItem]:
        """Nunca lança exceção: falha de fetch resulta em lista vazia"""
        try:
            response = await self.http_engine.get(final_url)
            if response is None or not response.ok:
                return []

            if response.content_type and not is_html_content_type(response.content_type):
                return []

            items = self.candidates_from_html(final_url, response.text, depth)
            if items:
                self.logger.debug(f"Descobertos {len(items)} candidatos em {final_url}")
            return items

        except Exception as e:
            self.logger.warning(f"Erro extraindo links de {final_url}: {e}")
            return []
