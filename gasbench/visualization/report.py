"""
Report output for gas benchmark results.
"""

import sys
import logging
from typing import List, TextIO

import pandas as pd

from gasbench.common.stats_utils import summarize
from gasbench.persistence.base import SampleStore

logger = logging.getLogger(__name__)

SUMMARY_COLUMNS = ['label', 'samples', 'min', 'max', 'avg', 'dev', 'sum']


def format_report(store: SampleStore) -> List[str]:
    """Format one block per label.

    Mean and deviation are rounded with the built-in round() (half to even);
    min, max and sum are exact.

    Args:
        store: Sample store from a completed run

    Returns:
        Report lines
    """
    lines = []
    for label, samples in store.entries():
        stats = summarize(samples)
        lines.append(f"gasUsed {label} (samples = {stats['samples']})")
        lines.append(f"  min. = {stats['min']}")
        lines.append(f"  max. = {stats['max']}")
        lines.append(f"  avg. = {round(stats['avg'])}")
        lines.append(f"  dev. = {round(stats['dev'])}")
        lines.append(f"  sum. = {stats['sum']}")
    return lines


def emit_report(store: SampleStore, stream: TextIO = None) -> None:
    """Write the report to ``stream`` (default: stdout)."""
    stream = stream or sys.stdout
    for line in format_report(store):
        print(line, file=stream)


def summary_frame(store: SampleStore) -> pd.DataFrame:
    """
    Summarize every label as one DataFrame row.

    Args:
        store: Sample store from a completed run

    Returns:
        DataFrame with label, samples, min, max, avg, dev and sum columns
    """
    rows = []
    for label, samples in store.entries():
        stats = summarize(samples)
        stats['avg'] = round(stats['avg'])
        stats['dev'] = round(stats['dev'])
        rows.append({'label': label, **stats})

    return pd.DataFrame(rows, columns=SUMMARY_COLUMNS)
