"""
ZipDB Command Layer
===================
Configuration, terminal rendering and the command functions used by main.py.
"""
