"""Adapters binding the core to the IRC network and HTTP."""
