"""
Auction domain model
"""
