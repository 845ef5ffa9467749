"""
Domain services built on top of the storage interface.
"""
