"""
Sharp Aquos RS-232C control tool.

Translates command names such as ``vol 30`` or ``dcabl1 12.3`` into the
television's fixed-format ASCII frames, sends them over a serial port and
checks each OK/ERR reply under a deadline.
"""

__version__ = "1.0.0"
