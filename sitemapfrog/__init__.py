"""
SitemapFrog
Crawler BFS limitado que gera um sitemap.xml validado para uma única origem
"""

__version__ = "0.1.0"
__description__ = "Bounded breadth-first crawler that builds a validated sitemap"

from sitemapfrog.core.config import CrawlConfig, StorageConfig, ProfileConfig
from sitemapfrog.core.exceptions import (
    SitemapFrogException, ConfigException, UploadException, MemoryException, ExportException
)
from sitemapfrog.utils.logger import setup_logging, get_logger

__all__ = [
    '__version__',
    '__description__',

    # Config
    'CrawlConfig',
    'StorageConfig',
    'ProfileConfig',

    # Exceptions
    'SitemapFrogException',
    'ConfigException',
    'UploadException',
    'MemoryException',
    'ExportException',

    # Utils
    'setup_logging',
    'get_logger',
]


def create_config(profile: str = 'standard', **overrides) -> CrawlConfig:
    """
    Função de conveniência para criar configuração

    Example:
        >>> from sitemapfrog import create_config
        >>> config = create_config('quick', max_urls=20)
    """
    from sitemapfrog.core.config import create_config_from_profile

    return create_config_from_profile(profile, **overrides)
