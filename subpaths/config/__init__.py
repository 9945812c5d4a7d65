# subpaths/config/__init__.py
