"""Transactional email."""
