"""
taskrank: a personal task tracker.

Tasks carry a priority letter (A most urgent) and are listed in a fixed order:
pending before done, then by priority letter, then by description.
"""

__version__ = "0.3.0"
