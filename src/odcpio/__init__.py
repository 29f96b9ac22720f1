"""Read portable ASCII ("odc") CPIO archives."""
__version__ = "0.1.0"
