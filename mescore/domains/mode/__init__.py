# mescore/domains/mode/__init__.py
