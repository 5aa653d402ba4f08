"""
File Explorer - Core Package

An interactive console tool for browsing and manipulating the file system
relative to a current-directory cursor.
"""

__version__ = "0.1.0"
