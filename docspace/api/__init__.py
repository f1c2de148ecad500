"""HTTP API for the document workspace."""
