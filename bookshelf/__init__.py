"""Bookshelf: personal book tracking API."""
