"""
ProtocolSearch - keyword search over a pre-extracted catalog of medical
protocol sections, with deep links into the companion PDF.
"""

__version__ = "0.1.0"
