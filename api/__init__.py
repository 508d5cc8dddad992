"""
HTTP adapter around the safe route engine.
"""
