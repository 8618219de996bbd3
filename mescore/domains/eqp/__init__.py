# mescore/domains/eqp/__init__.py
