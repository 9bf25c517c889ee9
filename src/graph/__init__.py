"""Graph import.

This package writes crosswalk graphs into a Neo4j database or a local graph folder.
"""
