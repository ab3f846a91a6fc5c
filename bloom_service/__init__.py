#!/usr/bin/env python3
"""
Bloom Watch service package

This package provides the HTTP backend for the Kenya NDVI dashboard:
serving bloom observations, forwarding prediction requests to the
external forecasting service, and falling back to local mock data.
"""

__version__ = '1.0.0'
