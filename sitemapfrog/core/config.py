"""
sitemapfrog/core/config.py
Configurações do SitemapFrog
"""

from dataclasses import dataclass, field, asdict, replace as dc_replace
from typing import Optional, Dict, Any, List, Tuple
import os

from sitemapfrog.core.exceptions import ConfigException

# === CONSTANTS ===

DEFAULT_DOMAIN = "https://fixup.ge"
DEFAULT_USER_AGENT = "FixUp-Sitemap-Crawler/1.0"

DEFAULT_SEED_PATHS = (
    '',
    '/services',
    '/mechanics',
    '/search',
    '/service-search',
    '/about',
    '/contact',
    '/laundries',
    '/category',
)

# Termos de busca em georgiano e inglês
DEFAULT_SEARCH_TERMS = (
    'ძრავი',
    'საბურავები',
    'ზეთის შეცვლა',
    'დიაგნოსტიკა',
    'engine',
    'tires',
    'oil change',
    'diagnostics',
    'brakes',
)

DEFAULT_PAGINATION_SEED_PATHS = (
    '/services?page=2',
    '/services?page=3',
    '/mechanics?page=2',
    '/mechanics?page=3',
)

DEFAULT_CATEGORY_SLUGS = (
    'engine-repair',
    'diagnostics',
    'tires',
    'brakes',
    'oil-change',
    'electrical',
    'bodywork',
    'suspension',
    'air-conditioning',
    'car-wash',
    'towing',
    'transmission',
)

DEFAULT_CONTENT_KEYWORDS = (
    # Georgian
    'სერვისი',
    'ხელოსანი',
    'მექანიკოსი',
    'ავტო',
    'შეკეთება',
    'დიაგნოსტიკა',
    # English
    'service',
    'mechanic',
    'repair',
    'car',
    'auto',
    # Produto
    'fixup',
)


@dataclass(frozen=True)
class CrawlConfig:
    """Configuração imutável do crawler de sitemap"""

    # === TARGET ===
    domain: str = DEFAULT_DOMAIN

    # === LIMITS ===
    max_urls: int = 2000
    min_urls_target: int = 100
    max_depth: int = 4
    timeout: int = 15
    concurrent_requests: int = 5
    max_redirects: int = 10

    # === FALLBACK ===
    fallback_max_candidates: int = 200
    fallback_id_window: int = 10

    # === CONTENT ===
    min_content_length: int = 2000

    # === NETWORK ===
    user_agent: str = DEFAULT_USER_AGENT

    # === PERFORMANCE ===
    memory_limit_mb: int = 1024

    # === SEEDS & HEURISTICS ===
    seed_paths: Tuple[str, ...] = DEFAULT_SEED_PATHS
    search_terms: Tuple[str, ...] = DEFAULT_SEARCH_TERMS
    pagination_seed_paths: Tuple[str, ...] = DEFAULT_PAGINATION_SEED_PATHS
    category_slugs: Tuple[str, ...] = DEFAULT_CATEGORY_SLUGS
    content_keywords: Tuple[str, ...] = DEFAULT_CONTENT_KEYWORDS

    def __post_init__(self):
        """Validação automática após inicialização"""
        self.validate()

    def validate(self) -> None:
        """Valida configuração"""
        if not self.domain.startswith(('http://', 'https://')):
            raise ConfigException("domain deve começar com http:// ou https://", details={'domain': self.domain})

        if self.domain.endswith('/'):
            raise ConfigException("domain não deve terminar com /", details={'domain': self.domain})

        if self.max_urls <= 0:
            raise ConfigException("max_urls deve ser > 0")

        if self.min_urls_target < 0:
            raise ConfigException("min_urls_target não pode ser negativo")

        if self.max_depth < 0:
            raise ConfigException("max_depth não pode ser negativo")

        if self.timeout <= 0:
            raise ConfigException("timeout deve ser > 0")

        if self.concurrent_requests <= 0 or self.concurrent_requests > 50:
            raise ConfigException("concurrent_requests deve estar entre 1-50")

        if self.max_redirects < 0:
            raise ConfigException("max_redirects não pode ser negativo")

        if self.fallback_max_candidates < 0:
            raise ConfigException("fallback_max_candidates não pode ser negativo")

        if self.memory_limit_mb <= 0:
            raise ConfigException("memory_limit_mb deve ser > 0")

    @property
    def sitemap_url(self) -> str:
        return f"{self.domain}/sitemap.xml"

    def replace(self, **overrides) -> 'CrawlConfig':
        """Retorna cópia com overrides aplicados"""
        try:
            return dc_replace(self, **overrides)
        except TypeError as e:
            raise ConfigException(f"Override inválido: {e}")

    def to_dict(self) -> Dict[str, Any]:
        """Converte config para dict"""
        return asdict(self)


@dataclass(frozen=True)
class StorageConfig:
    """Destino dos documentos no object storage"""

    base_url: str
    service_key: str
    bucket: str = 'service-photos'
    sitemap_key: str = 'sitemap.xml'
    index_key: str = 'sitemap-index.xml'

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> 'StorageConfig':
        """Lê credenciais do ambiente (SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY)"""
        env = os.environ if environ is None else environ

        base_url = env.get('SUPABASE_URL')
        service_key = env.get('SUPABASE_SERVICE_ROLE_KEY')

        missing = [name for name, value in (
            ('SUPABASE_URL', base_url),
            ('SUPABASE_SERVICE_ROLE_KEY', service_key),
        ) if not value]
        if missing:
            raise ConfigException(f"Variáveis de ambiente ausentes: {', '.join(missing)}")

        return cls(base_url=base_url.rstrip('/'), service_key=service_key)

    def object_url(self, key: str) -> str:
        return f"{self.base_url}/storage/v1/object/{self.bucket}/{key}"


@dataclass
class ProfileConfig:
    """Profile de configuração pré-definido"""
    name: str
    description: str
    config: CrawlConfig

    @classmethod
    def get_profiles(cls) -> Dict[str, 'ProfileConfig']:
        """Retorna profiles pré-definidos"""
        return {
            'standard': cls(
                name='standard',
                description='Crawl padrão - 2000 URLs, profundidade 4',
                config=CrawlConfig()
            ),

            'quick': cls(
                name='quick',
                description='Teste rápido - 50 URLs, profundidade 1, sem fallback',
                config=CrawlConfig(
                    max_urls=50,
                    min_urls_target=0,
                    max_depth=1,
                    timeout=10,
                )
            ),
        }

    @classmethod
    def get_profile(cls, name: str) -> Optional['ProfileConfig']:
        """Retorna profile específico"""
        return cls.get_profiles().get(name.lower())

    @classmethod
    def list_profiles(cls) -> List[str]:
        """Lista nomes de todos os profiles"""
        return list(cls.get_profiles().keys())


# === FACTORY FUNCTIONS ===

def create_config_from_profile(profile_name: str, **overrides) -> CrawlConfig:
    """Cria config a partir de profile com overrides"""
    profile = ProfileConfig.get_profile(profile_name)
    if not profile:
        raise ConfigException(f"Profile '{profile_name}' não encontrado")

    overrides = {k: v for k, v in overrides.items() if v is not None}
    return profile.config.replace(**overrides)
