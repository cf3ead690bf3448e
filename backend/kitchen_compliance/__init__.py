"""Kitchen compliance backend: fridge registry and temperature logging."""
