"""
Auction commands
"""
