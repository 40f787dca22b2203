"""
Transaction records with write-time snapshots of the catalog entries they reference.
"""
