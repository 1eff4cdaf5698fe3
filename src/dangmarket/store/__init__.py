"""Store module: shops, delivery settings, checkout and orders."""
