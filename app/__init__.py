"""
Travel List application package.

Layered the same way throughout:

  app/repositories/  pure I/O: loading from and persisting to JSON files.
  app/services/      business logic: validation, limits, domain rules.

``travel_server.py`` is the integration point: ``create_app`` builds the
repositories and services from a :class:`~app.config.Settings` instance and
exposes them to the Flask route handlers, which stay thin.
"""
