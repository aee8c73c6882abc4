"""Shared Kernel module.

This module contains foundational components that are explicitly shared across
multiple bounded contexts: identifiers, the permission vocabulary, the
authorization provider protocol and the error taxonomy. Changes to this module
affect both the IAM and Tickets contexts and should be carefully coordinated.
"""
