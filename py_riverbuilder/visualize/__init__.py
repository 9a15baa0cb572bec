"""
Diagnostic charts.
"""

from .charts import render_charts

__all__ = ['render_charts']
