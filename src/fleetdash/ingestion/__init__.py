"""Ingestion layer.

This package turns raw store records into typed models and runs the
per-cycle read orchestration against the document store.
"""

__all__: list[str] = []
