"""
Repository ranking and threshold configuration.
"""
