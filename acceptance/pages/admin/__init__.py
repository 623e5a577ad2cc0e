"""Administration panel page objects."""

from . import country_pages
from .login_page import DashboardPage, LoginPage

__all__ = [
    "country_pages",
    "DashboardPage",
    "LoginPage",
]
