"""Application layer: executors, posts use cases, and collaborator interfaces."""
