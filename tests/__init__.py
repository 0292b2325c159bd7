"""
Test suite for the pagequill project.

This module contains all unit tests for the pagequill package.
"""
