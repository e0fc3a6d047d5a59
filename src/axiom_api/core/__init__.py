"""Cross-cutting concerns: exceptions, logging, validation."""
