"""
Shared pytest configuration.

etsuite.model.TestCase matches pytest's default ``Test*`` class pattern
and is imported by most test modules; mark it as not a test class so
collection skips it.
"""

from etsuite.model import TestCase

TestCase.__test__ = False
