"""Jinja2 template filters."""

from .domain import AuthorizeViewModel


def display_name(field: str) -> str:
    """Get the label under which a consent prompt field is shown."""
    return AuthorizeViewModel.display_name(field)
