"""
sitemapfrog/core/crawler.py
Orquestrador do crawl: seeding → batches BFS → fallback → sitemap → upload
"""

import asyncio
import os
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional
from urllib.parse import urlencode

import psutil

from sitemapfrog.core.config import CrawlConfig, StorageConfig
from sitemapfrog.core.exceptions import MemoryException
from sitemapfrog.core.fallback import PatternFallbackDiscoverer
from sitemapfrog.core.frontier import Frontier
from sitemapfrog.core.http_engine import HTTPEngine
from sitemapfrog.core.models import (
    CrawlResult, QueueItem, SOURCE_SEED, SOURCE_SEARCH_SEED, SOURCE_PAGINATION_SEED
)
from sitemapfrog.core.redirects import RedirectResolver
from sitemapfrog.exporters.sitemap_exporter import SitemapExporter
from sitemapfrog.exporters.storage import StorageUploader, upload_sitemaps
from sitemapfrog.parsers.content_parser import ContentValidator
from sitemapfrog.parsers.links_parser import LinkExtractor
from sitemapfrog.utils.logger import get_logger, CrawlProgressLogger, LogContext
from sitemapfrog.utils.urls import normalize_url

SEARCH_PATHS = ('/search', '/service-search')


class CrawlState(str, Enum):
    IDLE = 'idle'
    SEEDING = 'seeding'
    CRAWLING = 'batch-crawling'
    FALLBACK = 'fallback-probing'
    EMITTING = 'emitting'
    DONE = 'done'
    FAILED = 'failed'


@dataclass
class ItemOutcome:
    """Resultado do pipeline de uma URL, aplicado ao Frontier depois do batch"""
    item: QueueItem
    result: Optional[CrawlResult] = None
    valid: bool = False
    candidates: List[QueueItem] = field(default_factory=list)


class SitemapCrawler:
    """
    Crawler BFS limitado que produz um sitemap validado para uma única origem

    Example:
        >>> crawler = SitemapCrawler(CrawlConfig())
        >>> summary = asyncio.run(crawler.run())
    """

    def __init__(self, config: CrawlConfig, http_engine=None, store=None):
        self.config = config
        self.http_engine = http_engine
        self.store = store
        self.logger = get_logger('SitemapCrawler')

        self.exporter = SitemapExporter(config.sitemap_url)
        self.fallback = PatternFallbackDiscoverer(config)

        self.state = CrawlState.IDLE
        self.frontier = Frontier()
        self.sitemap_xml: Optional[str] = None
        self.index_xml: Optional[str] = None
        self.start_time: Optional[datetime] = None

        self.resolver: Optional[RedirectResolver] = None
        self.validator: Optional[ContentValidator] = None
        self.extractor: Optional[LinkExtractor] = None

    # ==========================================
    # CICLO DE VIDA
    # ==========================================

    def _set_state(self, state: CrawlState, status: str) -> None:
        self.state = state
        self.frontier.update_progress(status)
        self.logger.debug(f"Estado: {state.value} ({status})")

    async def run(self) -> Dict[str, Any]:
        """Executa um crawl completo e retorna o resumo JSON-serializável"""
        self.frontier = Frontier()
        self.sitemap_xml = None
        self.index_xml = None
        self.start_time = datetime.now()

        self.logger.info(f"🚀 Iniciando crawl de sitemap: {self.config.domain}")
        self.logger.info(
            f"⚙️  Config: {self.config.max_urls:,} URLs max, depth {self.config.max_depth}, "
            f"{self.config.concurrent_requests} requests/batch, mínimo {self.config.min_urls_target}"
        )

        try:
            if self.http_engine is not None:
                return await self._run_with_engine(self.http_engine)

            async with HTTPEngine(self.config) as engine:
                return await self._run_with_engine(engine)

        except Exception as e:
            self._set_state(CrawlState.FAILED, f"Failed: {e}")
            self.logger.error(f"❌ Crawl falhou: {e}")
            raise

    async def _run_with_engine(self, engine) -> Dict[str, Any]:
        self.resolver = RedirectResolver(engine, self.config)
        self.validator = ContentValidator(engine, self.config)
        self.extractor = LinkExtractor(engine, self.config)

        with LogContext(self.logger, 'seeding'):
            self._set_state(CrawlState.SEEDING, 'Seeding...')
            self.seed()

        with LogContext(self.logger, 'crawl em batches'):
            self._set_state(CrawlState.CRAWLING, 'Crawling...')
            await self.crawl_batches()

        if len(self.frontier.valid) < self.config.min_urls_target:
            with LogContext(self.logger, 'fallback por padrões'):
                self._set_state(CrawlState.FALLBACK, 'Probing fallback candidates...')
                await self.probe_fallback()

        with LogContext(self.logger, 'geração e upload do sitemap'):
            self._set_state(CrawlState.EMITTING, 'Generating sitemap...')
            self.sitemap_xml, self.index_xml = self.exporter.emit(self.frontier.valid.values())

            self.frontier.update_progress('Uploading to storage...')
            await upload_sitemaps(self._get_store(), self.sitemap_xml, self.index_xml)

        self._set_state(CrawlState.DONE, 'Complete')
        return self.build_summary()

    def _get_store(self):
        if self.store is None:
            self.store = StorageUploader(StorageConfig.from_env())
        return self.store

    # ==========================================
    # SEEDING
    # ==========================================

    def seed_items(self) -> List[QueueItem]:
        """Seeds fixos (depth 0) + buscas e paginação (depth 1)"""
        domain = self.config.domain
        items = [
            QueueItem(url=normalize_url(f"{domain}{path}"), depth=0, source=SOURCE_SEED)
            for path in self.config.seed_paths
        ]

        for term in self.config.search_terms:
            for path in SEARCH_PATHS:
                url = normalize_url(f"{domain}{path}?{urlencode({'q': term})}")
                items.append(QueueItem(url=url, depth=1, source=SOURCE_SEARCH_SEED))

        for path in self.config.pagination_seed_paths:
            items.append(QueueItem(url=normalize_url(f"{domain}{path}"), depth=1, source=SOURCE_PAGINATION_SEED))

        return items

    def seed(self) -> int:
        added = self.frontier.discover_all(self.seed_items())
        self.frontier.update_progress('Seeded')
        self.logger.info(f"🌱 {added} URLs seed adicionadas à fila")
        return added

    # ==========================================
    # PIPELINE POR URL
    # ==========================================

    async def process_item(self, item: QueueItem, extract_links: bool = True) -> ItemOutcome:
        """Resolver → Validator → Extractor. Erros ficam contidos na URL."""
        outcome = ItemOutcome(item=item)
        try:
            result = await self.resolver.resolve(item.url)
            if result is None or result.status != 200:
                return outcome

            result.depth = item.depth
            outcome.result = result

            if not await self.validator.is_real_content(result.final_url):
                self.logger.debug(f"Conteúdo rejeitado: {result.final_url}")
                return outcome

            outcome.valid = True
            if extract_links and item.depth < self.config.max_depth:
                outcome.candidates = await self.extractor.extract(result.final_url, item.depth + 1)

        except Exception as e:
            self.logger.warning(f"Erro processando {item.url}: {e}")

        return outcome

    def merge_outcome(self, outcome: ItemOutcome) -> None:
        if outcome.result is not None and outcome.result.redirect_count > 0:
            self.frontier.progress.redirects_resolved += 1

        if outcome.valid:
            self.frontier.record_valid(outcome.result)

        self.frontier.discover_all(outcome.candidates)

    # ==========================================
    # FASES
    # ==========================================

    async def crawl_batches(self) -> None:
        """BFS em batches de `concurrent_requests`; cada batch termina antes do próximo"""
        progress_logger = CrawlProgressLogger(self.logger, self.config.max_urls)

        while self.frontier.queue and len(self.frontier.processed) < self.config.max_urls:
            batch = self.frontier.pop_batch(self.config.concurrent_requests, self.config.max_urls)
            if not batch:
                break

            for item in batch:
                self.frontier.mark_processed(item.url)

            outcomes = await asyncio.gather(*(self.process_item(item) for item in batch))
            for outcome in outcomes:
                self.merge_outcome(outcome)

            current_depth = max(item.depth for item in batch)
            self.frontier.update_progress(f"Crawled batch at depth {current_depth}", current_depth)
            progress_logger.log_batch(
                len(self.frontier.processed), len(self.frontier.valid),
                len(self.frontier.queue), current_depth
            )
            self._check_memory_usage()

        progress_logger.log_final_stats(
            len(self.frontier.processed), len(self.frontier.valid),
            self.frontier.progress.redirects_resolved
        )

    async def probe_fallback(self) -> int:
        """Sonda sequencialmente os candidatos sintetizados (sem extrair links)"""
        self.logger.info(
            f"⚠️ Apenas {len(self.frontier.valid)} URLs válidas "
            f"(mínimo {self.config.min_urls_target}). Ativando fallback..."
        )

        candidates = self.fallback.generate_candidates(
            self.frontier.valid_final_urls(), list(self.frontier.discovered.keys())
        )

        new_valid = 0
        for item in candidates:
            if len(self.frontier.processed) >= self.config.max_urls:
                self.logger.info("Limite de URLs processadas atingido durante fallback")
                break

            if not self.frontier.discover(item, enqueue=False) or self.frontier.is_processed(item.url):
                continue
            self.frontier.mark_processed(item.url)

            before = len(self.frontier.valid)
            self.merge_outcome(await self.process_item(item, extract_links=False))
            new_valid += len(self.frontier.valid) - before

        self.frontier.update_progress(f"Fallback found {new_valid} URLs")

        if new_valid == 0:
            self.logger.warning("⚠️ Fallback não encontrou nenhuma URL válida nova - padrões de rota podem ter mudado")
        else:
            self.logger.info(f"🎯 Fallback adicionou {new_valid} URLs válidas")

        return new_valid

    def _check_memory_usage(self) -> None:
        """Verifica uso de memória e aborta se muito acima do limite"""
        try:
            memory_mb = psutil.Process(os.getpid()).memory_info().rss / 1024 / 1024
        except psutil.Error:
            return

        if memory_mb > self.config.memory_limit_mb:
            self.logger.warning(f"Uso de memória alto: {memory_mb:.1f}MB (limite: {self.config.memory_limit_mb}MB)")

            if memory_mb > self.config.memory_limit_mb * 1.5:
                raise MemoryException(
                    "Limite de memória excedido",
                    memory_usage=int(memory_mb),
                    limit=self.config.memory_limit_mb
                )

    # ==========================================
    # RESUMO
    # ==========================================

    def build_summary(self) -> Dict[str, Any]:
        frontier = self.frontier
        return {
            'success': True,
            'totalUrls': len(frontier.valid),
            'breakdown': {
                'discovered': len(frontier.discovered),
                'processed': len(frontier.processed),
                'valid': len(frontier.valid),
                'redirectsResolved': frontier.progress.redirects_resolved,
                'maxDepth': self.config.max_depth,
                'depthDistribution': {str(depth): count for depth, count in frontier.depth_distribution().items()},
                'contentTypes': frontier.content_types(),
            },
            'progress': frontier.progress.to_dict(),
        }

    def get_results(self) -> List[CrawlResult]:
        return sorted(self.frontier.valid.values(), key=lambda r: r.final_url)
