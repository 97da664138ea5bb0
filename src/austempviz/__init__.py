try:
    from ._version import version as __version__  # written by setuptools-scm at build time
except ImportError:
    from importlib.metadata import version, PackageNotFoundError
    try:
        __version__ = version("austemp-viz")
    except PackageNotFoundError:
        __version__ = "0+unknown"
