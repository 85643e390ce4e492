"""
services/__init__.py
Pricing, scoring, consensus and leaderboard services built on the core engine.
"""
