"""Chat with webhook-backed agents through a same-origin relay."""
