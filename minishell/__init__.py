"""A small interactive command shell with pipes, redirections and expansion."""

__version__ = "0.1.0"