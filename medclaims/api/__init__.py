"""
HTTP API for the Medical Claims Service.
"""
