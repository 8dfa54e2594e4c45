"""
Rendering of the final link check report.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, TextIO

from .results import CrawlResult, ResultStore


OK_ICON = '✅'
FAILED_ICON = '❌'


def format_result(result: CrawlResult) -> str:
    """Format one result as a report line."""
    icon = OK_ICON if result.ok else FAILED_ICON
    tag = '[External]' if result.is_external else '[Internal]'
    return f"{icon} [{result.status}] {tag} {result.url}"


class ReportWriter:
    """
    Writes the sorted results of a finished run.
    
    Rendering only reads from the result store.
    """
    
    def __init__(self, results: ResultStore, seed_url: Optional[str] = None):
        self.results = results
        self.seed_url = seed_url
        self.logger = logging.getLogger(__name__)
    
    def render_lines(self) -> List[str]:
        """Render the report body, one line per URL."""
        return [format_result(result) for result in self.results.sorted()]
    
    def print_report(self, stream: Optional[TextIO] = None):
        """Print the report to a stream (stdout by default)."""
        stream = stream or sys.stdout
        self.logger.info("=== LINK CHECK REPORT ===")
        for line in self.render_lines():
            print(line, file=stream)
        
        summary = self.results.summary()
        print(
            f"{summary['total']} URLs checked: {summary['ok']} ok, {summary['failed']} failed "
            f"({summary['internal']} internal, {summary['external']} external)",
            file=stream
        )
    
    def write_json(self, file_path: str):
        """Export the sorted results and summary to a JSON file."""
        path = Path(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        
        export_data = {
            'generated_at': datetime.now(timezone.utc).isoformat(),
            'seed_url': self.seed_url,
            'summary': self.results.summary(),
            'results': [result.to_dict() for result in self.results.sorted()]
        }
        
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(export_data, f, ensure_ascii=False, indent=2)
        
        self.logger.info(f"Report written to {path}")
