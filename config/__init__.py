"""Configuration for the message queue."""
