"""Schema-less record editor: key mapping, field rule inference and list/detail sync."""

__version__ = "0.1.0"
