"""In-process stand-ins for the bank platform."""
