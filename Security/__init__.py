"""Security building blocks: sessions, anti-forgery, audit, hashing and request hardening."""
