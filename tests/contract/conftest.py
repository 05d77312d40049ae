"""
Contract test fixtures.

Contract tests check the seams between services: the columns one service
reads from another's tables and the response shapes other clients rely on.
They reuse the per-service clients from tests/conftest.py.
"""
