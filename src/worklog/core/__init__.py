"""Core session tracking and reporting."""
