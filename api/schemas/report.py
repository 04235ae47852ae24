"""
Report Schemas
Formats the report endpoint can return
"""

from enum import Enum


class ReportFormat(str, Enum):
    """Output formats, all rendered from the same report data"""
    JSON = "json"
    TEXT = "text"
    STRUCTURED = "structured"
