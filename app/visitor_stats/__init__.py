"""
Visitor Stats Module

Provides the admin dashboard: visits per day and the total number of searches.
"""

from .factory import create_visitor_stats_module

__all__ = ["create_visitor_stats_module"]
