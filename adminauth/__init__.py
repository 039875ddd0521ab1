"""Administrative user credential service."""
