"""
StarCasa

Scans folders for Picasa .picasa.ini sidecar files, collects the photos that
were starred, sorts them by orientation (portrait, landscape or square) and
writes a plain-text file list for each orientation.
"""

__version__ = "1.0.0"
__author__ = "Richard Lawrence"
