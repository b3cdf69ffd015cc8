"""Infrastructure — database engine lifecycle and logging setup."""
