"""Gallery module - photos and videos shown on the public site."""
