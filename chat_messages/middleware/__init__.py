"""HTTP middleware: error handling and metrics."""
