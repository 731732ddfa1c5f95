"""Command line interface for the Hilltop ingest tool."""
