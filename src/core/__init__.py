"""Core domain package for titlebot.

Core contains link extraction, title resolution, and dispatch logic without
any IRC-specific code, keeping the business logic portable.
"""
