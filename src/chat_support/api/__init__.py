"""HTTP transport for the chat support service."""
