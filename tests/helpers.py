"""
Test helpers - well-known identifier values

507f1f77bcf86cd799439011 is the example id used throughout database
documentation, so it doubles as a recognizable fixture here.
"""

KNOWN_HEX = "507f1f77bcf86cd799439011"
KNOWN_BYTES = [0x50, 0x7F, 0x1F, 0x77, 0xBC, 0xF8, 0x6C, 0xD7, 0x99, 0x43, 0x90, 0x11]
