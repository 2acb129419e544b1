"""
Unit model and the template catalog.
"""

from .templates import UNIT_TEMPLATES, UnitTemplate, build_unit, get_template, list_templates
from .unit import DamageProfile, MovementProfile, Unit, UnitStats, UnitStatus

__all__ = [
    "UNIT_TEMPLATES",
    "DamageProfile",
    "MovementProfile",
    "Unit",
    "UnitStats",
    "UnitStatus",
    "UnitTemplate",
    "build_unit",
    "get_template",
    "list_templates",
]
