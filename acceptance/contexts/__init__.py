"""
================================================================================
Step Contexts
================================================================================

Groups of step definitions wired through the service container:

    - setup: creates state straight in the repositories
    - transform: converts captured text into entities
    - ui: drives page objects in the browser
    - domain: the same behaviour exercised on entities only

================================================================================
"""

from .base import Context

__all__ = [
    "Context",
]
