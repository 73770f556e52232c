"""School profile module - the singleton profile shown on the public site."""
