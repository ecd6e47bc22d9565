"""
HTTP API for the clinic scheduling service.
"""
