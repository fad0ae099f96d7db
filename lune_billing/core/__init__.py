"""Core configuration, logging, storage and error plumbing."""
