"""Query engines implementing ``IQuery``.

``adapters.memory`` has no dependencies. ``adapters.sqla`` requires
SQLAlchemy and is imported explicitly.
"""
