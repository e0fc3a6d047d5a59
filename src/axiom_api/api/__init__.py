"""HTTP API for aXiom."""
