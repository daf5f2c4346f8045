"""
sitemapfrog/cli.py
Interface de linha de comando
"""

import argparse
from typing import Any, Dict, List, Optional

from sitemapfrog import __version__
from sitemapfrog.core.config import CrawlConfig, ProfileConfig, create_config_from_profile
from sitemapfrog.core.exceptions import ConfigException

# Mapeamento de argumentos CLI para campos do CrawlConfig
ARG_MAPPINGS = {
    'domain': 'domain',
    'max_urls': 'max_urls',
    'max_depth': 'max_depth',
    'min_urls': 'min_urls_target',
    'concurrency': 'concurrent_requests',
    'timeout': 'timeout',
}


def create_cli_parser() -> argparse.ArgumentParser:
    """Cria parser CLI"""
    profiles = ProfileConfig.get_profiles()

    parser = argparse.ArgumentParser(
        prog='sitemapfrog',
        description='🐸 SitemapFrog - crawler BFS que gera sitemap.xml validado',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
🚀 EXEMPLOS DE USO:

  Crawl e upload para o object storage (SUPABASE_URL / SUPABASE_SERVICE_ROLE_KEY):
    sitemapfrog crawl

  Crawl rápido gravando os XMLs localmente:
    sitemapfrog crawl --profile quick --no-upload --output ./out --report

  Servidor HTTP (POST /crawl-sitemap, GET /sitemap.xml):
    sitemapfrog serve --port 8080

📋 PROFILES:
    standard  {profiles['standard'].description}
    quick     {profiles['quick'].description}
        """
    )
    parser.add_argument('--version', action='version', version=f'SitemapFrog v{__version__}')
    parser.add_argument('--log-level', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'], default='INFO',
                        help='Nível de logging')
    parser.add_argument('--log-dir', help='Diretório para arquivos de log')

    subparsers = parser.add_subparsers(dest='command', required=True)

    # ==================== CRAWL ====================

    crawl_parser = subparsers.add_parser('crawl', help='Executa um crawl e gera o sitemap')
    _add_config_arguments(crawl_parser, profiles)

    output_group = crawl_parser.add_argument_group('💾 Output')
    output_group.add_argument('--no-upload', action='store_true',
                              help='Grava os XMLs em --output em vez do object storage')
    output_group.add_argument('--output', default='sitemapfrog_output',
                              help='Diretório de output (default: sitemapfrog_output)')
    output_group.add_argument('--report', action='store_true',
                              help='Exporta as URLs válidas em CSV')

    # ==================== SERVE ====================

    serve_parser = subparsers.add_parser('serve', help='Sobe o servidor HTTP')
    _add_config_arguments(serve_parser, profiles)
    serve_parser.add_argument('--host', default='0.0.0.0')
    serve_parser.add_argument('--port', type=int, default=8080)

    return parser


def _add_config_arguments(parser: argparse.ArgumentParser, profiles: Dict[str, ProfileConfig]) -> None:
    config_group = parser.add_argument_group('⚙️ Configurações de Crawl')
    config_group.add_argument('--profile', choices=list(profiles.keys()), default='standard',
                              help='Profile base')
    config_group.add_argument('--domain', help='Origem alvo (ex: https://fixup.ge)')
    config_group.add_argument('--max-urls', type=int, help='Máximo de URLs processadas')
    config_group.add_argument('--max-depth', type=int, help='Profundidade máxima do BFS')
    config_group.add_argument('--min-urls', type=int, help='Mínimo de URLs válidas antes do fallback')
    config_group.add_argument('--concurrency', type=int, help='Requests simultâneos por batch')
    config_group.add_argument('--timeout', type=int, help='Timeout por request em segundos')


def build_config_from_args(args: argparse.Namespace) -> CrawlConfig:
    """Constrói CrawlConfig a partir do profile + overrides"""
    overrides = {
        config_key: getattr(args, arg_name)
        for arg_name, config_key in ARG_MAPPINGS.items()
        if getattr(args, arg_name, None) is not None
    }
    if 'domain' in overrides:
        overrides['domain'] = overrides['domain'].rstrip('/')

    return create_config_from_profile(args.profile, **overrides)


def parse_cli_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse dos argumentos; erros de configuração viram erro do parser"""
    parser = create_cli_parser()
    args = parser.parse_args(argv)

    try:
        args.config = build_config_from_args(args)
    except ConfigException as e:
        parser.error(f"Erro na configuração: {e}")

    return args
