"""Design intent vocabulary and models."""
