"""
record-tools: derive record keys and headers from values found inside
nested record bodies.
"""
__version__ = "0.1.0"
