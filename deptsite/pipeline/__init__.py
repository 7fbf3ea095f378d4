"""Headless pipeline layer: public API access and page generation."""
