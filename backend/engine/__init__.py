"""
Snapshot holders for the clustering engine.

An engine owns the current immutable `ClusterIndex` and swaps it atomically on reload.
"""
