"""
Coming Soon Modules
===================

Flask blueprint modules registered by `comingsoon.create_app`.
"""

__all__ = ['subscribers', 'ops', 'site']
