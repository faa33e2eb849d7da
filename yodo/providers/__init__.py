"""Concrete adapters behind the interfaces in :mod:`yodo.interfaces`."""
