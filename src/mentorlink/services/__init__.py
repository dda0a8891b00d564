"""Application services for the messaging core."""
