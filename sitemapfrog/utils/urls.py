"""
sitemapfrog/utils/urls.py
Classificação de URLs: mesma origem, páginas com conteúdo e escape XML
"""

import re
from typing import Optional, Tuple
from urllib.parse import urlparse, urlunparse, parse_qs

import idna

from sitemapfrog.utils.logger import get_logger

logger = get_logger('URLs')

# Extensões de arquivos estáticos que nunca viram página
STATIC_EXTENSIONS = re.compile(
    r'\.(css|js|mjs|map|jpg|jpeg|png|gif|svg|webp|avif|ico|bmp|pdf|zip|gz|xml|json|txt|'
    r'woff|woff2|ttf|eot|otf|mp3|mp4|webm|avi|mov)$',
    re.IGNORECASE
)

# Rotas administrativas, de autenticação e de API
EXCLUDED_PATH_FRAGMENTS = (
    '/admin',
    '/login',
    '/register',
    '/dashboard',
    '/auth',
    '/api/',
    '/_',
)

DEFAULT_PORTS = {'http': '80', 'https': '443'}

XML_ESCAPES = (
    ('&', '&amp;'),
    ('<', '&lt;'),
    ('>', '&gt;'),
    ('"', '&quot;'),
    ("'", '&apos;'),
)


def _normalize_host(host: str) -> str:
    """Lowercase + IDNA para domínios internacionais"""
    host = host.lower()
    try:
        return idna.encode(host).decode('ascii')
    except (idna.IDNAError, UnicodeError):
        return host


def get_origin(url: str) -> Optional[Tuple[str, str, str]]:
    """
    Retorna (scheme, host, port) normalizados ou None se a URL não for http(s)

    Example:
        >>> get_origin("HTTPS://FixUp.ge:443/services")
        ('https', 'fixup.ge', '443')
    """
    try:
        parsed = urlparse(url.strip())
    except (ValueError, AttributeError):
        return None

    scheme = parsed.scheme.lower()
    if scheme not in DEFAULT_PORTS or not parsed.hostname:
        return None

    try:
        port = str(parsed.port) if parsed.port else DEFAULT_PORTS[scheme]
    except ValueError:
        return None

    return scheme, _normalize_host(parsed.hostname), port


def is_internal_url(url: str, domain: str) -> bool:
    """Verifica se a URL pertence à mesma origem do domínio alvo"""
    origin = get_origin(url)
    return origin is not None and origin == get_origin(domain)


def is_valid_page_url(url: str) -> bool:
    """
    Verifica se a URL aponta para uma página com conteúdo real
    (exclui assets estáticos, rotas administrativas/autenticação e API)
    """
    try:
        parsed = urlparse(url)
    except ValueError:
        return False

    path = parsed.path.lower()

    if STATIC_EXTENSIONS.search(path):
        return False

    if any(fragment in path for fragment in EXCLUDED_PATH_FRAGMENTS):
        return False

    # URL só com fragment (ex: https://site/#top)
    if parsed.fragment and not path.strip('/') and not parsed.query:
        return False

    return True


def normalize_url(url: str) -> str:
    """
    Normalização mínima para deduplicação: remove fragment, lowercase no host,
    remove porta padrão. Path e query são preservados.

    Example:
        >>> normalize_url("https://FixUp.ge:443/services#top")
        'https://fixup.ge/services'
    """
    try:
        parsed = urlparse(url.strip())
    except ValueError:
        return url

    scheme = parsed.scheme.lower()
    netloc = parsed.netloc
    if parsed.hostname:
        host = _normalize_host(parsed.hostname)
        try:
            port = parsed.port
        except ValueError:
            port = None
        if port and str(port) != DEFAULT_PORTS.get(scheme):
            netloc = f"{host}:{port}"
        else:
            netloc = host

    path = parsed.path or '/'
    return urlunparse((scheme, netloc, path, parsed.params, parsed.query, ''))


def get_page_number(url: str) -> Optional[int]:
    """Retorna o valor do parâmetro `page` da URL, se houver e for numérico"""
    try:
        values = parse_qs(urlparse(url).query).get('page')
    except ValueError:
        return None

    if not values:
        return None

    try:
        return int(values[0])
    except ValueError:
        logger.debug(f"Parâmetro page não numérico em {url}")
        return None


def has_page_param(url: str) -> bool:
    try:
        return 'page' in parse_qs(urlparse(url).query, keep_blank_values=True)
    except ValueError:
        return False


def escape_xml(text: str) -> str:
    """Escapa os cinco caracteres reservados do XML"""
    for char, entity in XML_ESCAPES:
        text = text.replace(char, entity)
    return text
