# mescore/domains/__init__.py
