"""
sitemapfrog/core/fallback.py
Descoberta por padrões quando o crawl orgânico não atinge o mínimo de URLs
"""

import re
from itertools import chain, zip_longest
from typing import Dict, Iterable, List, Set
from urllib.parse import urlparse

from sitemapfrog.core.config import CrawlConfig
from sitemapfrog.core.models import QueueItem, SOURCE_FALLBACK
from sitemapfrog.utils.logger import get_logger
from sitemapfrog.utils.urls import normalize_url

FALLBACK_DEPTH = 1

# /service/123 ou /service/123-troca-de-oleo
ID_PATH_PATTERNS = {
    '/service': re.compile(r'^/service/(\d+)(?:-[^/]*)?/?$'),
    '/mechanic': re.compile(r'^/mechanic/(\d+)(?:-[^/]*)?/?$'),
}

CATEGORY_PREFIXES = ('/category', '/services')


class PatternFallbackDiscoverer:
    """
    Sintetiza URLs candidatas a partir dos paths já válidos:
    janelas de IDs em torno dos IDs observados e paths de categoria fixos.
    """

    def __init__(self, config: CrawlConfig):
        self.config = config
        self.logger = get_logger('PatternFallback')

    def observed_ids(self, valid_urls: Iterable[str]) -> Dict[str, Set[int]]:
        """IDs numéricos por prefixo de rota"""
        ids: Dict[str, Set[int]] = {prefix: set() for prefix in ID_PATH_PATTERNS}

        for url in valid_urls:
            path = urlparse(url).path
            for prefix, pattern in ID_PATH_PATTERNS.items():
                match = pattern.match(path)
                if match:
                    ids[prefix].add(int(match.group(1)))

        return ids

    def id_window_paths(self, ids_by_prefix: Dict[str, Set[int]]) -> List[str]:
        """Paths vizinhos aos IDs observados, do mais próximo ao mais distante"""
        paths = []
        for offset in range(1, self.config.fallback_id_window + 1):
            for prefix, ids in ids_by_prefix.items():
                for observed in sorted(ids):
                    for candidate in (observed + offset, observed - offset):
                        if candidate > 0:
                            paths.append(f"{prefix}/{candidate}")
        return paths

    def category_paths(self) -> List[str]:
        return [f"{prefix}/{slug}" for slug in self.config.category_slugs for prefix in CATEGORY_PREFIXES]

    def generate_candidates(self, valid_urls: Iterable[str], known_urls: Iterable[str]) -> List[QueueItem]:
        """
        Gera candidatos ainda desconhecidos, limitados a `fallback_max_candidates`

        Args:
            valid_urls: URLs já validadas (fonte dos padrões)
            known_urls: URLs já descobertas (excluídas dos candidatos)
        """
        valid_urls = list(valid_urls)
        known = set(known_urls)

        ids_by_prefix = self.observed_ids(valid_urls)
        id_paths = self.id_window_paths(ids_by_prefix)
        category_paths = self.category_paths()

        observed_count = sum(len(ids) for ids in ids_by_prefix.values())
        if observed_count == 0:
            self.logger.warning("⚠️ Nenhum ID numérico observado em /service/<id> ou /mechanic/<id>")

        # Intercala IDs e categorias para que o limite não descarte um tipo inteiro
        merged = (path for path in chain.from_iterable(zip_longest(id_paths, category_paths)) if path)

        candidates: List[QueueItem] = []
        seen = set()
        for path in merged:
            if len(candidates) >= self.config.fallback_max_candidates:
                break
            url = normalize_url(f"{self.config.domain}{path}")
            if url in known or url in seen:
                continue
            seen.add(url)
            candidates.append(QueueItem(url=url, depth=FALLBACK_DEPTH, source=SOURCE_FALLBACK))

        self.logger.info(
            f"🎯 Fallback: {observed_count} IDs observados → {len(candidates)} candidatos "
            f"(limite {self.config.fallback_max_candidates})"
        )
        return candidates
