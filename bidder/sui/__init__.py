"""
Sui network model, argument resolution and JSON-RPC access
"""
