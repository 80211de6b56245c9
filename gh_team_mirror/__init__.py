"""Export GitHub team topology from one organization and mirror it into another."""

__version__ = "0.1.0"
