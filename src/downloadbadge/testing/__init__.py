"""Test utilities for badge apps.

Provides an in-process ASGI test client::

    from downloadbadge.testing import TestClient
"""

from downloadbadge.testing.client import TestClient

__all__ = ["TestClient"]
