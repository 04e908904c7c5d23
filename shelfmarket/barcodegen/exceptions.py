# -*- coding: utf-8 -*-
"""
RU: Единственный тип ошибки подсистемы EAN-13.
EN: Single error kind for the EAN-13 subsystem.

Every precondition violation (digit widths, overflow, malformed or forged
codes, out-of-range render parameters) is reported as ``Ean13Error``
before any output is produced. It subclasses ``ValueError`` so callers that
only know about built-in exceptions still catch it.
"""

from __future__ import annotations


class Ean13Error(ValueError):
    """Invalid argument for EAN-13 composition, validation or rendering."""
