"""
Normalization of raw repository facts.
"""
