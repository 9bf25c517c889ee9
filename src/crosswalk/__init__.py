"""Crosswalk conversion.

This package converts source XML documents into graph models.
"""
