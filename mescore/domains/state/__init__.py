# mescore/domains/state/__init__.py
