"""Career insights backend: profile updates and industry analytics."""
