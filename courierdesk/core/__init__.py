"""Cross-cutting concerns: logging, errors, authorization."""
