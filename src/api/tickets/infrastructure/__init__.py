"""Infrastructure layer for the Tickets bounded context."""
