"""
linkcheck

An asynchronous link checker that crawls a single website and reports
the reachability of every page and outbound link it finds.
"""

__version__ = "1.0.0"
__description__ = "Concurrent same-host crawler and link health reporter"
