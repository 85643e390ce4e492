"""
domain/__init__.py
Value types shared by the pricing, scoring and consensus services.
"""
