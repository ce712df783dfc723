"""
Berlin wastewater pipeline

Incrementally fetches open-data wastewater measurements from the
hygiene-monitor API and merges them into a local JSON store.
"""

__version__ = "1.0.0"
