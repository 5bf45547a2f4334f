"""
Rats - a top-down maze shooter on a wraparound grid.
"""

__version__ = "0.1.0"
