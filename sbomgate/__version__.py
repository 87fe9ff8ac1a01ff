"""Version information for sbomgate."""
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version


def get_version() -> str:
    """Return the installed distribution version, or a dev marker when running from a checkout."""
    try:
        return version('sbomgate')
    except PackageNotFoundError:
        return '0.0.0-dev'


__version__ = get_version()
