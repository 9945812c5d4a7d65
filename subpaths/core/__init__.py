# subpaths/core/__init__.py
