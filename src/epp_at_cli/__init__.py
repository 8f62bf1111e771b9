"""
nic.at EPP CLI

Command-line tool over the epp_at client library.
"""

__version__ = "1.0.0"
