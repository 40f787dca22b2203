"""
Admin-controlled lookup catalogs referenced by transaction records.
"""
