"""
Command line interface for kgmap.
"""
