"""
Notes Board - note state synchronization and trending ranking
"""

__version__ = "1.0.0"
