"""
core/__init__.py
Configuration, constants, errors and the LMSR market maker.
"""
