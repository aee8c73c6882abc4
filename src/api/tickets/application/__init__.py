"""Application layer for the Tickets bounded context."""
