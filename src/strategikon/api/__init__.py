"""HTTP API for the Strategikon combat engine."""
