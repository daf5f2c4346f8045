"""
sitemapfrog/core/exceptions.py
Sistema de exceções do SitemapFrog
"""

from typing import Optional, Dict, Any


class SitemapFrogException(Exception):
    """Base exception para SitemapFrog"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items() if v is not None)
            if details_str:
                return f"{self.message} ({details_str})"
        return self.message


class ConfigException(SitemapFrogException):
    """Erro de configuração"""
    pass


class UploadException(SitemapFrogException):
    """Erro enviando documento para o object storage"""

    def __init__(self, message: str, key: Optional[str] = None, status_code: Optional[int] = None, **kwargs):
        details = {'key': key, 'status_code': status_code}
        details.update(kwargs)
        super().__init__(message, details)


class MemoryException(SitemapFrogException):
    """Erro de memória/recursos"""

    def __init__(self, message: str, memory_usage: Optional[int] = None, limit: Optional[int] = None, **kwargs):
        details = {'memory_usage_mb': memory_usage, 'limit_mb': limit}
        details.update(kwargs)
        super().__init__(message, details)


class ExportException(SitemapFrogException):
    """Erro durante export"""

    def __init__(self, message: str, filename: Optional[str] = None, format_type: Optional[str] = None, **kwargs):
        details = {'filename': filename, 'format_type': format_type}
        details.update(kwargs)
        super().__init__(message, details)
