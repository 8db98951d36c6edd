"""
Retrieval of repository facts from GitHub.
"""
