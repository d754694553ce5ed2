"""
Review notice gating.

This module decides whether a registered notice is visible to a viewer and
applies the viewer's "later" and "dismiss" responses.
"""

__all__ = ["models", "keys", "clock", "dismissal", "filters", "engine", "registry"]
