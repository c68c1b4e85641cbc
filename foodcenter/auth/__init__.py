"""
User records and session authentication.
"""
