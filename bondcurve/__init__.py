"""
Linear price bonding curve engine.
"""
