"""
MotoScout HTTP API package.
"""
