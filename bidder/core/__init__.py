"""
Core building blocks shared across the project: commands, services, logging
"""
