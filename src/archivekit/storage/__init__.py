"""PathStore backends: local filesystem, in-memory and Django storage."""
