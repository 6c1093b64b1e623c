"""Service integrations: the user store, identity management, and e-mail."""
