"""Notification transports and the failure handlers that use them."""
