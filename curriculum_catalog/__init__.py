"""Curriculum Catalog Engine.

Aggregates curriculum records and the school registry of a university
backend into a reconciled school → program → department hierarchy and
serves filtered, sorted and paginated views of it.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"
