"""Utility modules for Biogas Monitor."""
from utils.logger import setup_logging
from utils.formatters import format_timestamp, format_kpi, parse_timestamp, time_ago
from utils.http_client import HTTPClient, APIError
from utils.sorting import SortableFilterable, SortConfig, ASCENDING, DESCENDING
