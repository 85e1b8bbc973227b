"""
Statusline: derived character status computation.

Watches raw character resources (spell slots, tracked features), recomputes
one aggregate status per metric domain whenever the underlying data changes,
and persists the result as a keyed record for the rest of the application.
"""

__version__ = "0.1.0"
