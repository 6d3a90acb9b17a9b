"""
CN Admin Tree - builds China's administrative division hierarchy.

This package turns a flat listing of administrative division codes
(name + 6-digit code) into a province/prefecture/county forest annotated
with ancestry metadata, plus a flat id lookup index.
"""

__version__ = "1.0.0"
__author__ = "Data Analytics Team"
