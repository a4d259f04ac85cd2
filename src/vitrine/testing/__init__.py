"""Test utilities for vitrine applications::

    from vitrine.testing import TestClient
"""

from vitrine.testing.client import TestClient

__all__ = ["TestClient"]
