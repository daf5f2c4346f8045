"""
sitemapfrog/utils/logger.py
Sistema de logging do SitemapFrog
"""

import logging
import logging.handlers
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional


class SitemapFrogFormatter(logging.Formatter):
    """Formatter customizado para SitemapFrog"""

    # Cores para console
    COLORS = {
        'DEBUG': '\033[36m',    # Cyan
        'INFO': '\033[32m',     # Green
        'WARNING': '\033[33m',  # Yellow
        'ERROR': '\033[31m',    # Red
        'CRITICAL': '\033[35m', # Magenta
        'RESET': '\033[0m'
    }

    def __init__(self, use_colors: bool = True):
        self.use_colors = use_colors
        super().__init__()

    def format(self, record):
        timestamp = datetime.fromtimestamp(record.created).strftime('%Y-%m-%d %H:%M:%S')

        level = record.levelname
        if self.use_colors and level in self.COLORS:
            level = f"{self.COLORS[level]}{level:<8}{self.COLORS['RESET']}"
        else:
            level = f"{level:<8}"

        # Logger name truncado
        logger_name = record.name
        if len(logger_name) > 24:
            logger_name = logger_name[:21] + "..."
        logger_name = f"{logger_name:<24}"

        message = record.getMessage()
        if record.exc_info:
            message += f"\n{self.formatException(record.exc_info)}"

        return f"{timestamp} | {level} | {logger_name} | {message}"


def setup_logging(
    level: str = "INFO",
    output_dir: Optional[str] = None,
    log_filename: Optional[str] = None,
    max_file_size: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5
) -> logging.Logger:
    """
    Configura sistema de logging

    Args:
        level: Nível de log (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        output_dir: Diretório para arquivos de log (None = apenas console)
        log_filename: Nome customizado do arquivo (default: auto-gerado)
        max_file_size: Tamanho máximo do arquivo antes de rotacionar
        backup_count: Número de backups a manter

    Returns:
        Logger principal configurado
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    numeric_level = getattr(logging, level.upper(), logging.INFO)

    # === CONSOLE HANDLER ===
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(SitemapFrogFormatter(use_colors=sys.stdout.isatty()))

    root_logger.setLevel(logging.DEBUG)  # Captura tudo, handlers filtram
    root_logger.addHandler(console_handler)

    main_logger = logging.getLogger('SitemapFrog')

    if output_dir:
        Path(output_dir).mkdir(parents=True, exist_ok=True)

        if not log_filename:
            timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
            log_filename = f"sitemapfrog_{timestamp}.log"
        log_filepath = os.path.join(output_dir, log_filename)

        # === FILE HANDLER com rotação ===
        file_handler = logging.handlers.RotatingFileHandler(
            log_filepath,
            maxBytes=max_file_size,
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(SitemapFrogFormatter(use_colors=False))
        root_logger.addHandler(file_handler)

        # === ERROR HANDLER (arquivo separado) ===
        error_filepath = os.path.join(output_dir, f"sitemapfrog_errors_{datetime.now().strftime('%Y%m%d')}.log")
        error_handler = logging.FileHandler(error_filepath, encoding='utf-8')
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(SitemapFrogFormatter(use_colors=False))
        root_logger.addHandler(error_handler)

        main_logger.info(f"📁 Log file: {log_filepath}")
        main_logger.info(f"❌ Error log: {error_filepath}")

    main_logger.info(f"📊 Log level: {level.upper()}")
    return main_logger


def get_logger(name: str) -> logging.Logger:
    """Retorna logger para módulo específico"""
    return logging.getLogger(f'SitemapFrog.{name}')


class CrawlProgressLogger:
    """Logger especializado para progresso de crawl, um registro por batch"""

    def __init__(self, logger: logging.Logger, max_urls: int):
        self.logger = logger
        self.max_urls = max_urls
        self.start_time = datetime.now()
        self.last_count = 0
        self.last_time = self.start_time

    def log_batch(self, processed: int, valid: int, queue_size: int, depth: int):
        """Log de progresso após cada batch"""
        now = datetime.now()

        elapsed = (now - self.start_time).total_seconds()
        rate = processed / elapsed if elapsed > 0 else 0

        interval_elapsed = (now - self.last_time).total_seconds()
        interval_rate = (processed - self.last_count) / interval_elapsed if interval_elapsed > 0 else 0

        percentage = (processed / self.max_urls * 100) if self.max_urls > 0 else 0

        self.logger.info(
            f"📊 Progresso: {processed:,}/{self.max_urls:,} URLs ({percentage:.1f}%) | "
            f"Válidas: {valid:,} | Queue: {queue_size:,} | Depth: {depth} | "
            f"Rate: {rate:.1f} URLs/s (atual: {interval_rate:.1f})"
        )

        self.last_count = processed
        self.last_time = now

    def log_final_stats(self, processed: int, valid: int, redirects: int):
        """Log de estatísticas finais"""
        elapsed = (datetime.now() - self.start_time).total_seconds()
        avg_rate = processed / elapsed if elapsed > 0 else 0
        valid_rate = (valid / processed * 100) if processed > 0 else 0

        self.logger.info(
            f"✅ Crawl finalizado! {processed:,} URLs em {elapsed:.1f}s "
            f"(avg: {avg_rate:.1f} URLs/s) | Válidas: {valid_rate:.1f}% | "
            f"Redirects resolvidos: {redirects:,}"
        )


# === CONTEXT MANAGERS ===

class LogContext:
    """Context manager para logar duração de uma fase"""

    def __init__(self, logger: logging.Logger, context_name: str):
        self.logger = logger
        self.context_name = context_name
        self.start_time = None

    def __enter__(self):
        self.start_time = datetime.now()
        self.logger.info(f"🔄 Iniciando {self.context_name}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        elapsed = (datetime.now() - self.start_time).total_seconds()

        if exc_type is None:
            self.logger.info(f"✅ {self.context_name} concluído em {elapsed:.2f}s")
        else:
            self.logger.error(f"❌ {self.context_name} falhou em {elapsed:.2f}s: {exc_val}")
