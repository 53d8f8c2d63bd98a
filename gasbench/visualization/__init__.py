"""
Report output for gas benchmark results.
"""

from .report import format_report, emit_report, summary_frame

__all__ = ['format_report', 'emit_report', 'summary_frame']
