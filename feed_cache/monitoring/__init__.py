"""
Monitoring module for the feed cache system.

This module provides run timing and resource metrics collection for
batch runs.
"""

from .performance_monitor import PerformanceMonitor, PerformanceMetrics

__all__ = [
    'PerformanceMonitor',
    'PerformanceMetrics'
]
