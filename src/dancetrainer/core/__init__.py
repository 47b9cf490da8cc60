"""Core data models, enums, configuration and errors."""
