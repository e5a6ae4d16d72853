"""
Output Generation Package
Handles generating extraction reports.
"""

from .report_generator import ReportGenerator

__all__ = ['ReportGenerator']
