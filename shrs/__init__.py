"""Building blocks for an interactive POSIX shell: lexer, job control, aliases, hooks, builtins and a builder."""

__version__ = "0.1.0"