"""
infrastructure - Concrete implementations of domain ports.

Contains all vendor-specific code: Tesseract, pypdf, Pillow, aiosqlite.
Depends on domain/ only (implements ports). Never imported by application/.
"""
