"""btrbk-deploy: btrbk_deploy/__init__.py."""


__version__ = "0.1.0"


def unit_name(instance: str) -> str:
    """Return the systemd unit stem for an instance, e.g. 'btrbk-daily'."""
    return f"btrbk-{instance}"
