"""HTTP API for driver priority dispatch."""
