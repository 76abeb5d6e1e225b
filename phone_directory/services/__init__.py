"""Business logic for the phone directory."""
