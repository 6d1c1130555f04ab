"""
Shot Group Capture package.

This package contains modules for calibrating a photographed paper target,
converting tapped bullet holes into inch coordinates relative to the point of
aim, and calculating marksmanship group statistics.
"""

__version__ = '1.0.0'
