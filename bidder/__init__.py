"""
Client library for the `bidder` Sui auction protocol.
"""
