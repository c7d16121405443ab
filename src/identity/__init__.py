"""Record identity layer.

This module derives stable record keys and encodes display titles.
It has no storage dependencies so every layer can use it.
"""
