"""Test suite for Image Update Checker.

This package contains test modules and fixtures for verifying the functionality
of the Image Update Checker tool. It includes tests for:
- Pattern compilation, tag matching and update classification
- Dockerfile and compose parsing
- The Docker Hub registry client
- Planning, execution and reporting
- The command line interface

The test suite uses pytest and provides fixtures for common test scenarios.
"""
