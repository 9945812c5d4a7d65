# subpaths/cli/__init__.py
