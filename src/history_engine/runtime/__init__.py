"""Runtime services (logging, diagnostics, profiling)."""
