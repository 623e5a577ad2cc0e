"""
================================================================================
Page Objects
================================================================================

Page Object Model implementations for the administration panel.

Each page class encapsulates:
    - Named element locators (DEFINED_ELEMENTS)
    - Page-specific actions
    - Verification methods

Author: Automation Team
License: MIT
================================================================================
"""

from .crud import CreatePage, IndexPage, ResourcePage, UpdatePage

__all__ = [
    "CreatePage",
    "IndexPage",
    "ResourcePage",
    "UpdatePage",
]
