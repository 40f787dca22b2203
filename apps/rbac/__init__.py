"""
Identity, authentication and role-based access control.
"""
