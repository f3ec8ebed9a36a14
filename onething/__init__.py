"""
OneThing Tracker
Daily task tracker core: level progression and local reminder scheduling
"""

__version__ = "1.0.0"
