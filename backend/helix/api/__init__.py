"""HTTP API for Helix."""
