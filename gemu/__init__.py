"""Game Boy CPU emulation: instruction decoding, execution and memory-mapped registers."""

__version__ = "0.1.0"
__all__ = ["__version__"]