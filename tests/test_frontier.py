import pytest

from sitemapfrog.core.frontier import Frontier
from sitemapfrog.core.models import CrawlResult, QueueItem

from tests.conftest import DOMAIN


def item(path: str, depth: int = 0) -> QueueItem:
    return QueueItem(url=f"{DOMAIN}{path}", depth=depth, source='seed')


def result(path: str, final_path: str = None, depth: int = 0) -> CrawlResult:
    return CrawlResult(
        url=f"{DOMAIN}{path}",
        final_url=f"{DOMAIN}{final_path or path}",
        status=200,
        redirect_count=0 if final_path is None else 1,
        lastmod='2024-01-01',
        depth=depth,
        content_type='text/html',
    )


class TestDiscover:

    def test_new_url_is_queued(self):
        frontier = Frontier()
        assert frontier.discover(item('/a', 2))
        assert frontier.depth_of(f"{DOMAIN}/a") == 2
        assert len(frontier.queue) == 1

    def test_depth_only_decreases(self):
        frontier = Frontier()
        frontier.discover(item('/a', 2))

        assert not frontier.discover(item('/a', 3))
        assert frontier.depth_of(f"{DOMAIN}/a") == 2

        assert frontier.discover(item('/a', 1))
        assert frontier.depth_of(f"{DOMAIN}/a") == 1

    def test_processed_url_not_requeued(self):
        frontier = Frontier()
        frontier.discover(item('/a', 2))
        frontier.pop_batch(5, 100)
        frontier.mark_processed(f"{DOMAIN}/a")

        frontier.discover(item('/a', 0))
        assert not frontier.queue
        assert frontier.depth_of(f"{DOMAIN}/a") == 0

    def test_discover_without_enqueue(self):
        frontier = Frontier()
        assert frontier.discover(item('/a', 1), enqueue=False)
        assert frontier.depth_of(f"{DOMAIN}/a") == 1
        assert not frontier.queue

    def test_mark_processed_requires_discovery(self):
        with pytest.raises(KeyError):
            Frontier().mark_processed(f"{DOMAIN}/unknown")


class TestPopBatch:

    def test_respects_size_and_cap(self):
        frontier = Frontier()
        frontier.discover_all([item(f"/p{i}") for i in range(10)])

        assert len(frontier.pop_batch(5, 100)) == 5
        assert len(frontier.pop_batch(5, 3)) == 3

    def test_cap_counts_processed(self):
        frontier = Frontier()
        frontier.discover_all([item(f"/p{i}") for i in range(10)])
        for batch_item in frontier.pop_batch(4, 100):
            frontier.mark_processed(batch_item.url)

        assert len(frontier.pop_batch(5, 5)) == 1
        assert frontier.pop_batch(5, 4) == []

    def test_uses_lowest_known_depth(self):
        frontier = Frontier()
        frontier.discover(item('/a', 3))
        frontier.discover(item('/a', 1))

        batch = frontier.pop_batch(5, 100)
        assert [(b.url, b.depth) for b in batch] == [(f"{DOMAIN}/a", 1)]


class TestValid:

    def test_record_requires_processed(self):
        frontier = Frontier()
        frontier.discover(item('/a'))
        with pytest.raises(KeyError):
            frontier.record_valid(result('/a'))

    def test_same_final_url_recorded_once(self):
        frontier = Frontier()
        for path, depth in (('/old', 2), ('/new', 1)):
            frontier.discover(item(path, depth))
            frontier.mark_processed(f"{DOMAIN}{path}")

        assert frontier.record_valid(result('/old', '/new', depth=2))
        assert not frontier.record_valid(result('/new', depth=1))

        assert len(frontier.valid) == 1
        assert frontier.valid_final_urls() == [f"{DOMAIN}/new"]
        assert frontier.valid[f"{DOMAIN}/old"].depth == 1

    def test_subset_invariants_and_stats(self):
        frontier = Frontier()
        frontier.discover_all([item('/a', 0), item('/b', 1), item('/c', 1)])
        for url in (f"{DOMAIN}/a", f"{DOMAIN}/b"):
            frontier.mark_processed(url)
        frontier.record_valid(result('/a', depth=0))
        frontier.record_valid(result('/b', depth=1))

        assert frontier.check_invariants()
        assert frontier.depth_distribution() == {0: 1, 1: 1}
        assert frontier.content_types() == {'text/html': 2}

        progress = frontier.update_progress('Crawling', current_depth=1)
        assert progress.to_dict() == {
            'discovered': 3,
            'processed': 2,
            'valid': 2,
            'redirectsResolved': 0,
            'currentDepth': 1,
            'status': 'Crawling',
        }
