"""FastAPI dependency wiring for the Tickets bounded context.

This is the only place the Tickets context reaches into IAM: it borrows
the caller identity and the authorization resolver, both exposed through
shared-kernel types.
"""
