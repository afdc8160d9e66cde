"""
Authentication, error and logging helpers.
"""
