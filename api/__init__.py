"""
Decollage HTTP API.
"""
