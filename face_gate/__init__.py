"""
Face Gate

Biometric gate service: decides whether a submitted 128-dim face descriptor
belongs to the one configured identity, using that identity's enrolled
reference descriptors.
"""

__version__ = "1.0.0"
