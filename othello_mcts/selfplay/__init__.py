"""Self-play game runner."""
