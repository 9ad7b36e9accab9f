"""
Configuration package: settings loaded from the environment and logging setup.
"""
