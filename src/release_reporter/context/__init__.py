"""Clients for the external systems the reporter pulls build data from."""
