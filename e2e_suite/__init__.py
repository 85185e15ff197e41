"""
Test suites package.

Kept importable so that step definitions can be registered through
`pytest_plugins` and `run_tests.py` can address suites by path.
"""
