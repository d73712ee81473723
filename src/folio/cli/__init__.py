"""
Command line interface for folio.

Entry point: ``folio`` (see :mod:`folio.cli.app`).
"""
