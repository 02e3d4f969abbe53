"""Statistical helpers and the generic simulation harness."""
