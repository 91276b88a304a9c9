"""
Task Manager - multi-user task management API.
"""

__version__ = "0.1.0"
