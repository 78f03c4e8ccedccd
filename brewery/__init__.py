"""Brewery catalog client."""
