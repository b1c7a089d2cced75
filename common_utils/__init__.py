"""
Shared helpers for the School Management RBAC service
"""
