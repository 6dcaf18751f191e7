"""
ABC Payment Gateway

Adapter between merchant order systems and the Agricultural Bank of China
aggregated payment platform.
"""

__version__ = "1.0.0"
