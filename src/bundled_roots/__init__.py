"""
bundled_roots — embeddable snapshot generator for trusted root certificates.

Reads a PEM bundle, keeps the plain CERTIFICATE blocks, gzips each
certificate, and writes a Go source file that registers every root with a
lazily inflating certificate pool.

Built on the Railway-Oriented Programming (ROP) framework for
explicit, composable, functional error handling.
"""

__version__ = "0.1.0"
