"""HTTP API for the review bundler."""
