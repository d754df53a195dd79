"""
`bidder::auction` Sui Move package support

The Move package defines the following modules:
- `auction`: English auctions paid in any coin type, auctioning any number of items
- `user`: per user history of auctions created and bids placed
"""

AUCTION_MODULE = "auction"

USER_MODULE = "user"
