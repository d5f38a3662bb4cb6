"""
ClueAPI Modules
===============

Flask blueprint modules for each group of endpoints.
"""

__all__ = ['admin', 'contact', 'email', 'feed', 'subscribers']
