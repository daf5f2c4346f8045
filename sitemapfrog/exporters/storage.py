"""
sitemapfrog/exporters/storage.py
Upload/download dos documentos XML (object storage ou diretório local)
"""

import asyncio
from pathlib import Path
from typing import Optional

import aiohttp

from sitemapfrog.core.config import StorageConfig
from sitemapfrog.core.exceptions import UploadException
from sitemapfrog.utils.logger import get_logger

XML_CONTENT_TYPE = 'application/xml'


class StorageUploader:
    """
    Cliente do object storage (API REST estilo Supabase Storage)

    Cada upload é um POST com `x-upsert: true`, substituindo o objeto existente.
    """

    def __init__(self, storage_config: StorageConfig, timeout: int = 30):
        self.storage_config = storage_config
        self.timeout = timeout
        self.logger = get_logger('StorageUploader')

    @property
    def sitemap_key(self) -> str:
        return self.storage_config.sitemap_key

    @property
    def index_key(self) -> str:
        return self.storage_config.index_key

    def _headers(self) -> dict:
        return {'Authorization': f"Bearer {self.storage_config.service_key}"}

    async def upload(self, key: str, body: str) -> None:
        """Envia um documento; qualquer falha vira UploadException"""
        url = self.storage_config.object_url(key)
        headers = self._headers()
        headers.update({'Content-Type': XML_CONTENT_TYPE, 'x-upsert': 'true'})

        try:
            async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=self.timeout)) as session:
                async with session.post(url, data=body.encode('utf-8'), headers=headers,
                                        allow_redirects=False) as response:
                    if not 200 <= response.status < 300:
                        detail = await response.text()
                        raise UploadException(
                            f"Falha no upload de {key}: {detail[:200]}",
                            key=key, status_code=response.status
                        )
        except asyncio.TimeoutError:
            raise UploadException(f"Timeout no upload de {key}", key=key)
        except aiohttp.ClientError as e:
            raise UploadException(f"Erro de conexão no upload de {key}: {e}", key=key)

        self.logger.info(f"☁️ Upload concluído: {self.storage_config.bucket}/{key} ({len(body):,} bytes)")

    async def download(self, key: str) -> Optional[str]:
        """Baixa um documento; None se ausente ou inacessível"""
        url = self.storage_config.object_url(key)
        try:
            async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=self.timeout)) as session:
                async with session.get(url, headers=self._headers()) as response:
                    if response.status != 200:
                        self.logger.warning(f"Documento {key} indisponível (status {response.status})")
                        return None
                    return await response.text()
        except (asyncio.TimeoutError, aiohttp.ClientError) as e:
            self.logger.warning(f"Erro baixando {key}: {e}")
            return None


class FileSitemapStore:
    """Mesma interface do StorageUploader, gravando em diretório local"""

    sitemap_key = 'sitemap.xml'
    index_key = 'sitemap-index.xml'

    def __init__(self, output_dir: str):
        self.output_dir = Path(output_dir)
        self.logger = get_logger('FileSitemapStore')

    async def upload(self, key: str, body: str) -> None:
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            (self.output_dir / key).write_text(body, encoding='utf-8')
        except OSError as e:
            raise UploadException(f"Erro gravando {key}: {e}", key=key)
        self.logger.info(f"💾 Gravado: {self.output_dir / key}")

    async def download(self, key: str) -> Optional[str]:
        path = self.output_dir / key
        if not path.exists():
            return None
        return path.read_text(encoding='utf-8')


async def upload_sitemaps(store, sitemap_xml: str, index_xml: str) -> None:
    """Os dois uploads precisam dar certo; o primeiro erro interrompe"""
    await store.upload(store.sitemap_key, sitemap_xml)
    await store.upload(store.index_key, index_xml)
