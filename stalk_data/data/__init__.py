"""
Data normalization module.

Handles value coercion, market-cap formatting, metadata resolution across
candidate document locations and normalization of provider-specific price
records into canonical bars.
"""
