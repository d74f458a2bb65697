"""Cross-cutting pieces: exceptions, settings and logging."""
