"""Cross-cutting concerns: configuration, logging, metrics, errors."""
