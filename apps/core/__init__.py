"""
Core application: base model, error taxonomy, request authentication,
role permissions, request tracing and structured logging.
"""
