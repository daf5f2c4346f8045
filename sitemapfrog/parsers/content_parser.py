"""
sitemapfrog/parsers/content_parser.py
Validação de conteúdo: decide se uma página é conteúdo real ou um placeholder
"""

import re
from typing import Iterable

from sitemapfrog.core.config import CrawlConfig
from sitemapfrog.parsers.base import ParserMixin, make_soup, is_html_content_type
from sitemapfrog.utils.urls import is_valid_page_url, has_page_param

# Titles que indicam página de erro; 404/500 só contam como código isolado no início
ERROR_TITLE_PATTERN = re.compile(
    r'^\s*(404|500)\s*($|[-|:–])|\b(not found|error)\b|ვერ მოიძებნა|შეცდომა',
    re.IGNORECASE
)

MAIN_CONTENT_PATTERN = re.compile(
    r'<main[\s>]|role=["\']main["\']|<article[\s>]|id=["\'](main-content|content)["\']',
    re.IGNORECASE
)

LISTING_CARD_PATTERN = re.compile(
    r'class=["\'][^"\']*\b(card|service-card|mechanic-card|listing-item|grid-item)\b[^"\']*["\']'
    r'|data-(testid|card)=["\'][^"\']*card',
    re.IGNORECASE
)


def has_meaningful_title(html: str) -> bool:
    """<title> presente, não vazio e sem cara de página de erro"""
    soup = make_soup(html)
    if soup.title is None:
        return False

    title = soup.title.get_text(' ', strip=True)
    return bool(title) and not ERROR_TITLE_PATTERN.search(title)


def has_main_content(html: str, min_length: int) -> bool:
    """Marcadores estruturais de conteúdo principal ou corpo com `min_length` bytes (UTF-8)"""
    html = html or ''
    return bool(MAIN_CONTENT_PATTERN.search(html)) or len(html.encode('utf-8')) >= min_length


def has_domain_keywords(html: str, keywords: Iterable[str]) -> bool:
    """Termos do domínio (georgiano/inglês) ou nome do produto"""
    lowered = (html or '').lower()
    return any(keyword.lower() in lowered for keyword in keywords)


def has_listing_cards(html: str) -> bool:
    """Markup de cards/listagem (usado em URLs paginadas)"""
    return bool(LISTING_CARD_PATTERN.search(html or ''))


class ContentValidator(ParserMixin):
    """Classifica uma URL terminal como conteúdo real (True) ou não (False)"""

    def __init__(self, http_engine, config: CrawlConfig):
        super().__init__()
        self.http_engine = http_engine
        self.config = config

    def is_real_html(self, url: str, html: str) -> bool:
        """Aplica os sinais sobre HTML já obtido (sem I/O)"""
        if not has_meaningful_title(html):
            self.logger.debug(f"Sem title válido: {url}")
            return False

        structural = has_main_content(html, self.config.min_content_length)
        keywords = has_domain_keywords(html, self.config.content_keywords)
        if not (structural or keywords):
            self.logger.debug(f"Sem conteúdo principal nem keywords: {url}")
            return False

        if has_page_param(url) and not has_listing_cards(html):
            self.logger.debug(f"Página paginada sem cards: {url}")
            return False

        return True

    async def is_real_content(self, url: str) -> bool:
        if not is_valid_page_url(url):
            return False

        try:
            response = await self.http_engine.get(url)
        except Exception as e:
            self.logger.warning(f"Erro validando {url}: {e}")
            return False

        if response is None or not response.ok:
            return False

        if not is_html_content_type(response.content_type):
            self.logger.debug(f"Content-type não HTML ({response.content_type}): {url}")
            return False

        return self.is_real_html(url, response.text)
