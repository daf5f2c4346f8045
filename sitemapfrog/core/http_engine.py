"""
sitemapfrog/core/http_engine.py
Engine HTTP assíncrona: HEAD sem redirects e GET com corpo decodificado
"""

import asyncio
from dataclasses import dataclass, field
from typing import Dict, Optional

import aiohttp
import chardet

from sitemapfrog.core.config import CrawlConfig
from sitemapfrog.utils.logger import get_logger

REDIRECT_STATUSES = (301, 302, 303, 307, 308)


@dataclass
class HTTPResponse:
    """Resposta HTTP já materializada (sem conexão aberta)"""
    url: str
    status: int
    headers: Dict[str, str] = field(default_factory=dict)
    text: str = ''

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def is_redirect(self) -> bool:
        return 300 <= self.status < 400

    @property
    def content_type(self) -> str:
        """MIME type sem parâmetros (ex: 'text/html')"""
        return self.headers.get('content-type', '').split(';')[0].strip().lower()

    @property
    def location(self) -> Optional[str]:
        return self.headers.get('location')


def decode_body(content: bytes, declared_charset: Optional[str] = None) -> str:
    """Decodifica corpo usando charset declarado, chardet ou UTF-8 com replace"""
    if not content:
        return ''

    encoding = declared_charset
    if not encoding:
        detected = chardet.detect(content[:5000])
        if detected and (detected.get('confidence') or 0) > 0.7:
            encoding = detected['encoding']

    try:
        return content.decode(encoding or 'utf-8')
    except (UnicodeDecodeError, LookupError):
        return content.decode('utf-8', errors='replace')


class HTTPEngine:
    """
    Engine HTTP assíncrona baseada em aiohttp

    Cada request tem timeout próprio; falhas de rede e timeouts viram None
    para que o erro fique contido na URL.

    Example:
        >>> async with HTTPEngine(config) as engine:
        ...     response = await engine.head("https://fixup.ge/services")
    """

    def __init__(self, config: CrawlConfig):
        self.config = config
        self.session: Optional[aiohttp.ClientSession] = None
        self.logger = get_logger('HTTPEngine')

    async def __aenter__(self):
        connector = aiohttp.TCPConnector(limit=self.config.concurrent_requests * 2)
        self.session = aiohttp.ClientSession(
            connector=connector,
            timeout=aiohttp.ClientTimeout(total=self.config.timeout),
            headers={
                'User-Agent': self.config.user_agent,
                'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
                'Accept-Language': 'ka,en;q=0.8',
            }
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self.session:
            await self.session.close()
            self.session = None

    def _ensure_session(self) -> aiohttp.ClientSession:
        if self.session is None:
            raise RuntimeError("HTTPEngine precisa ser usado como 'async with'")
        return self.session

    async def head(self, url: str) -> Optional[HTTPResponse]:
        """HEAD sem seguir redirects"""
        session = self._ensure_session()
        try:
            async with session.head(url, allow_redirects=False) as response:
                return HTTPResponse(
                    url=str(response.url),
                    status=response.status,
                    headers={k.lower(): v for k, v in response.headers.items()},
                )
        except asyncio.TimeoutError:
            self.logger.debug(f"Timeout (HEAD) em {url}")
        except aiohttp.ClientError as e:
            self.logger.debug(f"Erro de conexão (HEAD) em {url}: {e}")
        return None

    async def get(self, url: str) -> Optional[HTTPResponse]:
        """GET seguindo redirects, com corpo decodificado"""
        session = self._ensure_session()
        try:
            async with session.get(url, allow_redirects=True) as response:
                content = await response.read()
                return HTTPResponse(
                    url=str(response.url),
                    status=response.status,
                    headers={k.lower(): v for k, v in response.headers.items()},
                    text=decode_body(content, response.charset),
                )
        except asyncio.TimeoutError:
            self.logger.debug(f"Timeout (GET) em {url}")
        except aiohttp.ClientError as e:
            self.logger.debug(f"Erro de conexão (GET) em {url}: {e}")
        return None
