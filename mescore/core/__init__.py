# mescore/core/__init__.py
