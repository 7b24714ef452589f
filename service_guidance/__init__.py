"""
Guidance gateway service package.
"""
