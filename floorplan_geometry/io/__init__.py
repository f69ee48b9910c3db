"""
Input modules for the floor-plan geometry engine.
"""

from .plan_loader import PlanFile, PlanLoadError, load_plan, parse_plan

__all__ = [
    'PlanFile',
    'PlanLoadError',
    'load_plan',
    'parse_plan',
]
