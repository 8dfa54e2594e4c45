"""
Result aggregation and reporting for link check runs.
"""

from .results import CrawlResult, ResultStore
from .report import ReportWriter, format_result

__all__ = ['CrawlResult', 'ResultStore', 'ReportWriter', 'format_result']
