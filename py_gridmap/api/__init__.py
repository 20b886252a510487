"""HTTP API over the map generator."""
