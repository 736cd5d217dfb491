"""Card show marketplace authorization layer."""
