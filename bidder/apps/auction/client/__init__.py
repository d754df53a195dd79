"""
Read side client for the bidder auction package
"""
