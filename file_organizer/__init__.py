"""
file-organizer: reorganize a directory tree by extension, date and size.
"""

__version__ = "0.1.0"
