"""
Decodes executed Sui transaction blocks into auction transactions, and object snapshots into domain objects
"""
