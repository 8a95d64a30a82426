"""Identity provider, credential vault and password services."""
