"""Request handling logic, independent of the web framework's routing."""
