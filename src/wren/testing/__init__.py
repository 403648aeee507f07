"""Test utilities for wren applications::

    from wren.testing import TestClient
"""

from wren.testing.client import CookieJar, TestClient

__all__ = ["CookieJar", "TestClient"]
