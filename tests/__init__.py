"""
Test package for mapped-refs.

- unit/: Unit and property tests for cells, mapped references, transforms,
  configuration, logging and the CLI

Run tests with:
    pytest tests/                    # All tests
    pytest tests/unit/test_mapping.py
"""
