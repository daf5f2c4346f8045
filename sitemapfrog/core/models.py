"""
sitemapfrog/core/models.py
Estruturas de dados do crawl
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

# Labels de origem de cada QueueItem
SOURCE_SEED = 'seed'
SOURCE_SEARCH_SEED = 'search-seed'
SOURCE_PAGINATION_SEED = 'pagination-seed'
SOURCE_HREF = 'href'
SOURCE_SCRIPT_PATH = 'script-path'
SOURCE_DATA_ATTRIBUTE = 'data-attribute'
SOURCE_PAGINATION = 'pagination'
SOURCE_FALLBACK = 'fallback'


@dataclass(frozen=True)
class QueueItem:
    url: str
    depth: int
    source: str


@dataclass
class CrawlResult:
    """Resultado de uma URL resolvida (e, se estiver no mapa de válidas, validada)"""
    url: str
    final_url: str
    status: int
    redirect_count: int
    lastmod: str
    depth: int = 0
    content_type: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class CrawlProgress:
    """Snapshot observacional do progresso; nunca usado para decisões"""
    discovered: int = 0
    processed: int = 0
    valid: int = 0
    redirects_resolved: int = 0
    current_depth: int = 0
    status: str = 'Idle'

    def to_dict(self) -> Dict[str, Any]:
        return {
            'discovered': self.discovered,
            'processed': self.processed,
            'valid': self.valid,
            'redirectsResolved': self.redirects_resolved,
            'currentDepth': self.current_depth,
            'status': self.status,
        }
