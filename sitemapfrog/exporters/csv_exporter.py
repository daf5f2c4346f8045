"""
sitemapfrog/exporters/csv_exporter.py
Relatório CSV das URLs válidas do crawl
"""

import os
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional

import pandas as pd

from sitemapfrog.core.exceptions import ExportException
from sitemapfrog.core.models import CrawlResult
from sitemapfrog.exporters.sitemap_exporter import calculate_priority, calculate_changefreq
from sitemapfrog.utils.logger import get_logger

COLUMN_ORDER = [
    'url',
    'final_url',
    'status',
    'redirect_count',
    'depth',
    'content_type',
    'priority',
    'changefreq',
    'lastmod',
]


class CSVExporter:
    """Exporta os resultados válidos para CSV com colunas ordenadas"""

    def __init__(self, output_dir: str = "sitemapfrog_output"):
        self.output_dir = output_dir
        self.logger = get_logger('CSVExporter')

    def build_dataframe(self, results: Iterable[CrawlResult]) -> pd.DataFrame:
        rows = []
        for result in results:
            row = result.to_dict()
            row['priority'] = calculate_priority(result.final_url, result.depth)
            row['changefreq'] = calculate_changefreq(result.final_url)
            rows.append(row)

        df = pd.DataFrame(rows, columns=COLUMN_ORDER)
        if not df.empty:
            df = df.sort_values('final_url').reset_index(drop=True)
        return df.fillna('')

    def export_results(self, results: List[CrawlResult], filename: Optional[str] = None) -> str:
        """
        Exporta resultados para CSV

        Returns:
            Caminho do arquivo gerado ('' se não houver dados)
        """
        if not results:
            self.logger.warning("Nenhum dado para exportar")
            return ""

        if not filename:
            timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
            filename = f"sitemapfrog_crawl_{timestamp}.csv"

        filepath = os.path.join(self.output_dir, filename)

        try:
            Path(self.output_dir).mkdir(parents=True, exist_ok=True)
            df = self.build_dataframe(results)
            df.to_csv(filepath, index=False, encoding='utf-8')
        except (OSError, ValueError) as e:
            error_msg = f"Erro exportando CSV: {e}"
            self.logger.error(error_msg)
            raise ExportException(error_msg, filename=filepath, format_type='csv')

        self.logger.info(f"✅ CSV exportado: {filepath} ({len(df):,} URLs)")
        return filepath
