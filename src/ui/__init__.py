"""
User interface components for the Site Plan Annotator
"""

from .site_plan_window import SitePlanWindow

__all__ = ['SitePlanWindow']
