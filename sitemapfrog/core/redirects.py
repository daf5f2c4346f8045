"""
sitemapfrog/core/redirects.py
Resolução manual de cadeias de redirect com limite de saltos
"""

from datetime import date
from typing import Optional
from urllib.parse import urljoin

from sitemapfrog.core.config import CrawlConfig
from sitemapfrog.core.models import CrawlResult
from sitemapfrog.utils.logger import get_logger
from sitemapfrog.utils.urls import is_internal_url, normalize_url


class RedirectResolver:
    """
    Segue redirects manualmente via HEAD para contar saltos

    Retorna None quando: a cadeia passa de `max_redirects` saltos, um redirect
    sai da origem, falta o header Location, o status final não é 2xx/3xx ou
    a request falha (timeout, rede). Não há retry.
    """

    def __init__(self, http_engine, config: CrawlConfig):
        self.http_engine = http_engine
        self.config = config
        self.logger = get_logger('RedirectResolver')

    async def resolve(self, url: str) -> Optional[CrawlResult]:
        current_url = url
        hops = 0

        while True:
            response = await self.http_engine.head(current_url)

            if response is None:
                self.logger.debug(f"Sem resposta para {current_url}")
                return None

            if response.ok:
                return CrawlResult(
                    url=url,
                    final_url=current_url,
                    status=response.status,
                    redirect_count=hops,
                    lastmod=date.today().isoformat(),
                    content_type=response.content_type or None,
                )

            if not response.is_redirect:
                self.logger.debug(f"Status {response.status} em {current_url}")
                return None

            if hops >= self.config.max_redirects:
                self.logger.warning(f"🔁 Loop/cadeia longa de redirects: {url} ({hops} saltos)")
                return None

            location = response.location
            if not location:
                self.logger.debug(f"Redirect {response.status} sem Location em {current_url}")
                return None

            next_url = urljoin(current_url, location)
            if not is_internal_url(next_url, self.config.domain):
                self.logger.debug(f"Redirect externo ignorado: {current_url} → {next_url}")
                return None

            current_url = normalize_url(next_url)
            hops += 1
