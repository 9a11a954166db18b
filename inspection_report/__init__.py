"""
Inspection report engine: paginated PDF layout for property inspections.
"""

__version__ = "1.0.0"
