"""
domain - Pure business rules: value objects, entities, ports and calculators.

Has no dependency on Tesseract, SQLite, FastAPI or any other vendor code.
"""
