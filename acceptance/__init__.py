"""
Storefront acceptance package.

Behaviour-driven acceptance harness for the store administration panel:
page objects, step contexts, feature runner and service wiring.
"""

__version__ = "1.0.0"
