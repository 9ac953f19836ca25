"""HTTP API for the film analytics engine."""
