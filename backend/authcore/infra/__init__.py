"""Concrete adapters for the ports in :mod:`authcore.services._shared.ports`."""
