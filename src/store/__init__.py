"""Version record storage.

This module persists the last processed snapshot per harvest source.
"""
