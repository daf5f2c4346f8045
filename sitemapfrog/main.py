#!/usr/bin/env python3
"""
sitemapfrog/main.py
Entry Point Principal do SitemapFrog
"""

import asyncio
import json
import sys
from typing import List, Optional

from sitemapfrog.cli import parse_cli_args
from sitemapfrog.core.crawler import SitemapCrawler
from sitemapfrog.core.exceptions import SitemapFrogException
from sitemapfrog.exporters.csv_exporter import CSVExporter
from sitemapfrog.exporters.storage import FileSitemapStore
from sitemapfrog.utils.logger import setup_logging, get_logger


def handle_crawl_mode(args) -> int:
    """Executa um crawl e imprime o resumo JSON"""
    logger = get_logger('Main')

    store = FileSitemapStore(args.output) if args.no_upload else None
    crawler = SitemapCrawler(args.config, store=store)

    try:
        summary = asyncio.run(crawler.run())
    except SitemapFrogException as e:
        logger.error(f"❌ Erro SitemapFrog: {e}")
        print(json.dumps({'success': False, 'error': str(e)}, ensure_ascii=False))
        return 1
    except Exception as e:
        logger.error(f"❌ Erro inesperado: {e}")
        print(json.dumps({'success': False, 'error': str(e)}, ensure_ascii=False))
        return 1

    if args.report:
        try:
            report_file = CSVExporter(args.output).export_results(crawler.get_results())
            if report_file:
                logger.info(f"📄 Relatório: {report_file}")
        except SitemapFrogException as e:
            logger.warning(f"Não foi possível exportar relatório: {e}")

    print(json.dumps(summary, indent=2, ensure_ascii=False))
    return 0


def handle_serve_mode(args) -> int:
    from sitemapfrog.server import run_server

    run_server(args.config, host=args.host, port=args.port)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point principal do SitemapFrog"""
    args = parse_cli_args(argv)
    setup_logging(level=args.log_level, output_dir=args.log_dir)

    try:
        if args.command == 'serve':
            return handle_serve_mode(args)
        return handle_crawl_mode(args)
    except KeyboardInterrupt:
        print("\n⚠️  Operação interrompida pelo usuário")
        return 130


def cli_entry_point():
    """Entry point para console script"""
    sys.exit(main())


if __name__ == "__main__":
    sys.exit(main())
