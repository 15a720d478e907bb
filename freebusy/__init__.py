"""
freebusy - visitor-facing availability calendar for a schedule owner.
"""

__version__ = "0.3.0"
