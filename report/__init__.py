"""
Advisory report rendering.
"""
