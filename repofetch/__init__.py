"""Git history metrics, info lines, manifests, ASCII art and terminal images."""

__version__ = "2.23.1"