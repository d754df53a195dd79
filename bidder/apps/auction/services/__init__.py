"""
Auction background services
"""
