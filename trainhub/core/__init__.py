"""
Core utilities shared across the TrainHub API.

This package hosts configuration, logging setup, password hashing and the
application error taxonomy. Routers and services depend on these primitives
instead of reading os.environ or configuring loggers on their own.
"""
