# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain services layer for the curriculum catalog engine.

Domains:
    catalog: Curriculum aggregation, school reconciliation, hierarchy
        derivation and catalog queries.
"""
