"""
WikiStack: a small wiki with tag-based page discovery.
"""
