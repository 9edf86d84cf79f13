"""
Review list processing.
"""
