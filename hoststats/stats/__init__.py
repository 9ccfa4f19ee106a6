"""
Snapshot records, output parsers and delta trackers.
"""
