"""Recursive filesystem traversal with exclusion pruning.

This package walks the directories selected by a backup configuration, skipping
any subtree whose path matches an exclusion, and yields the candidate paths
found along the way.
"""
