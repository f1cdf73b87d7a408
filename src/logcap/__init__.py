"""
logcap - log capture sessions for iOS simulators and devices.
"""

__version__ = "0.1.0"
