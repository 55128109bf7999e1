# Copyright (c) SEC Filings Agent.
# SPDX-License-Identifier: MIT
"""EDGAR external API package.

Purpose:
    Group EDGAR-related infrastructure modules:

    * settings: Pydantic settings for the EDGAR fetcher and caches.
    * client: Backoff-retrying async HTTP fetcher for SEC endpoints.
    * types: Typed response fragments for EDGAR endpoints.
    * mappers: Raw payload → domain value mapping.
"""

from __future__ import annotations
