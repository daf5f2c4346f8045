"""
sitemapfrog/parsers/base.py
Helpers comuns e ParserMixin para os parsers de HTML
"""

from typing import Optional

from bs4 import BeautifulSoup

from sitemapfrog.utils.logger import get_logger

HTML_CONTENT_TYPES = ('text/html', 'application/xhtml+xml')


def is_html_content_type(content_type: Optional[str]) -> bool:
    """True se o content-type (com ou sem parâmetros) for HTML"""
    if not content_type:
        return False
    return content_type.split(';')[0].strip().lower() in HTML_CONTENT_TYPES


def make_soup(html: str) -> BeautifulSoup:
    """BeautifulSoup com lxml (tolerante a markup quebrado)"""
    return BeautifulSoup(html or '', 'lxml')


class ParserMixin:
    """Base dos componentes que leem HTML: logger nomeado pela classe"""

    def __init__(self):
        self.logger = get_logger(self.__class__.__name__)
