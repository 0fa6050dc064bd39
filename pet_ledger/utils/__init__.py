"""
Utility package

Helpers shared across the whole project: date/time handling, display
formatting of derived values and contact field checks.
"""
