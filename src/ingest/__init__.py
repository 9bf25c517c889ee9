"""Document discovery and ingest orchestration.

This module finds harvested XML documents locally or in S3 and drives
them through transform, crosswalk, and graph import stages.
"""
