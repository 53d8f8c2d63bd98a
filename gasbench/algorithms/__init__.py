"""
Bulk runners and the scenario driver for the gas benchmark.
"""

from .bulk import BulkRunner
from .scenario import ScenarioDriver, make_label, plan_labels, MEASURED_OPERATIONS

__all__ = ['BulkRunner', 'ScenarioDriver', 'make_label', 'plan_labels', 'MEASURED_OPERATIONS']
