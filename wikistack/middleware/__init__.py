"""
Middleware package for WikiStack.
"""
