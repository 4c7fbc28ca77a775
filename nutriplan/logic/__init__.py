"""Core business logic layer.

Subpackages:
- calendar: assignment modes, month grid and the calendar controller
- reporting: month schedule summaries
"""
__all__ = ["calendar", "reporting"]
