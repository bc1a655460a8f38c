"""Extract Laravel Blade translation keys and back-fill language JSON files."""

__version__ = "0.1.0"
