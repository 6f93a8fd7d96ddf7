"""
Record Introspection Module

Infers how record fields should be displayed and edited from observed values.
Supports:
- Widget type inference (toggle, datetime, select, textarea, number, text)
- Read-only and required detection
- Per-collection rule caching for the session
"""

from .rule_inferencer import RuleInferencer, RuleCache, FieldRule, WidgetType

__all__ = [
    "RuleInferencer",
    "RuleCache",
    "FieldRule",
    "WidgetType",
]
