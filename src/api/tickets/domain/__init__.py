"""Domain layer for the Tickets bounded context."""
