"""Reading workout history files."""
