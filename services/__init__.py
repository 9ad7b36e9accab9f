"""
Background services for the flight price monitor.
"""
