"""Sui Scenario Harness.

End-to-end testing tool for exercising a ``Sui`` client against a local network.
"""

__version__ = "0.1.0"
