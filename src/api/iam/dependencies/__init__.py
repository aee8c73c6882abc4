"""Dependency injection for IAM bounded context.

Composes infrastructure resources (database sessions) with IAM-specific
components (repositories, services, probes).
"""
