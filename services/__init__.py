"""
Domain services for the Decollage API.
"""
