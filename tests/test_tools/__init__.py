"""
Test Tools Package
Tests for the timeline engine components
"""
