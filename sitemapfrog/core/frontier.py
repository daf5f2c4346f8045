"""
sitemapfrog/core/frontier.py
Estado do crawl: URLs descobertas, processadas e válidas + fila BFS
"""

from collections import deque, Counter
from typing import Deque, Dict, List, Optional, Set

from sitemapfrog.core.models import CrawlProgress, CrawlResult, QueueItem


class Frontier:
    """
    Dono exclusivo dos três conjuntos do crawl

    Invariantes:
        - discovered[url] é a menor profundidade em que a URL já foi vista
        - valid ⊆ processed ⊆ discovered
        - nenhuma URL processada volta para a fila
    """

    def __init__(self):
        self.discovered: Dict[str, int] = {}
        self.processed: Set[str] = set()
        self.valid: Dict[str, CrawlResult] = {}
        self.final_urls: Dict[str, str] = {}  # URL terminal → chave em valid
        self.queue: Deque[QueueItem] = deque()
        self.progress = CrawlProgress()

    def discover(self, item: QueueItem, enqueue: bool = True) -> bool:
        """
        Registra uma descoberta. Retorna True se a URL é nova ou ganhou
        profundidade menor; só entra na fila se ainda não foi processada
        e `enqueue` for True (o fallback sonda direto, sem fila).
        """
        known_depth = self.discovered.get(item.url)
        if known_depth is not None and known_depth <= item.depth:
            return False

        self.discovered[item.url] = item.depth
        if enqueue and item.url not in self.processed:
            self.queue.append(item)
        return True

    def discover_all(self, items: List[QueueItem]) -> int:
        return sum(1 for item in items if self.discover(item))

    def mark_processed(self, url: str) -> None:
        if url not in self.discovered:
            raise KeyError(f"URL processada sem ter sido descoberta: {url}")
        self.processed.add(url)

    def is_processed(self, url: str) -> bool:
        return url in self.processed

    def depth_of(self, url: str) -> Optional[int]:
        return self.discovered.get(url)

    def record_valid(self, result: CrawlResult) -> bool:
        """
        Registra resultado válido indexado pela URL requisitada (já processada).
        Duas URLs que redirecionam para a mesma URL terminal geram uma única
        entrada; a de menor profundidade prevalece.
        Retorna False se a URL terminal já estava registrada.
        """
        if result.url not in self.processed:
            raise KeyError(f"Resultado válido para URL não processada: {result.url}")

        existing_key = self.final_urls.get(result.final_url)
        if existing_key is not None:
            existing = self.valid[existing_key]
            if result.depth < existing.depth:
                existing.depth = result.depth
            return False

        self.valid[result.url] = result
        self.final_urls[result.final_url] = result.url
        return True

    def valid_final_urls(self) -> List[str]:
        return list(self.final_urls)

    def pop_batch(self, size: int, max_processed: int) -> List[QueueItem]:
        """
        Retira até `size` itens ainda não processados, sem deixar o total de
        processadas passar de `max_processed`. A profundidade vem do mapa de
        descobertas (pode ter diminuído depois do enfileiramento).
        """
        batch: List[QueueItem] = []
        batch_urls = set()
        remaining = max_processed - len(self.processed)

        while self.queue and len(batch) < min(size, remaining):
            item = self.queue.popleft()
            if item.url in self.processed or item.url in batch_urls:
                continue
            batch_urls.add(item.url)
            batch.append(QueueItem(url=item.url, depth=self.discovered[item.url], source=item.source))

        return batch

    def update_progress(self, status: str, current_depth: Optional[int] = None) -> CrawlProgress:
        self.progress.discovered = len(self.discovered)
        self.progress.processed = len(self.processed)
        self.progress.valid = len(self.valid)
        if current_depth is not None:
            self.progress.current_depth = current_depth
        self.progress.status = status
        return self.progress

    def depth_distribution(self) -> Dict[int, int]:
        return dict(sorted(Counter(result.depth for result in self.valid.values()).items()))

    def content_types(self) -> Dict[str, int]:
        return dict(Counter(
            (result.content_type or 'unknown').split(';')[0].strip().lower()
            for result in self.valid.values()
        ))

    def check_invariants(self) -> bool:
        return set(self.valid) <= self.processed <= set(self.discovered)
