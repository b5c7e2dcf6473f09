"""
RegCost Test Suite
==================

Test organization:
- tests/unit/                      - Shared library (config, LLM providers, logging)
- tests/services/cost_estimation/  - Estimation engine

Run tests:
    pytest                          # All tests
    pytest tests/unit               # Unit tests only
    pytest --cov=services           # With coverage
"""
