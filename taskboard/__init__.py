"""Taskboard application package.

Todo management service with admin approval and live dashboards.
"""
