"""Configuration package: environment settings and protocol constants."""
