"""Shared pytest setup.

The API reads Supabase settings when ``apps.api.main`` is imported, so
placeholder values are provided for test runs without a ``.env``.
"""

import os

os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
