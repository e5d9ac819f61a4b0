"""Configuration, logging, database access, errors and field validation."""
