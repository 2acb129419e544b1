from .rules_info import RULES_INFO

__all__ = ["RULES_INFO"]
