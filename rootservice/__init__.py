"""Service skeleton with JSON configuration, a shared object store, a service lifecycle and a WSGI endpoint."""

__version__ = "0.1.0"

__all__ = ["cli", "config", "manager", "root_service", "service_base", "tools", "web"]