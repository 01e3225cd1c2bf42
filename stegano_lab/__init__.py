"""
Stegano Lab - hide named files inside images and recover them byte-exact.
"""

__version__ = "1.0.0"
