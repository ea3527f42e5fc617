"""Configuration, logging and scheduling primitives."""
