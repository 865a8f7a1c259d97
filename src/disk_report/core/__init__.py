"""Directory-size aggregation and per-volume reporting engine."""
