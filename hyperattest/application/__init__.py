"""Application layer: ports (collaborator interfaces) and services."""
