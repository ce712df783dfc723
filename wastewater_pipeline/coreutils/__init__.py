"""
Core Utilities

Environment, configuration, logging, HTTP session and date helpers
shared by every pipeline layer.
"""
