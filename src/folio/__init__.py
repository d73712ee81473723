"""
Folio - portfolio document registry.

Content model, validation pipeline, and publishing workflow for multi-section
personal portfolios:

- folio.content: Pure transforms (sanitization, slugs, ordering, public output)
- folio.core: Errors, logging, settings, storage protocol and repositories
- folio.ops: Owner-scoped registry operations returning ``OperationResult``
- folio.cli: Typer command line front-end
"""

__version__ = "0.1.0"
