"""
Clinic scheduling: appointment slot availability for clinic days.
"""

__version__ = "1.0.0"
