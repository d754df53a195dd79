"""
Applications built on the Sui client support
"""
