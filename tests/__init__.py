"""
Test suite for Sample Manager.

Run all tests: pytest
Run with coverage: pytest --cov=. --cov-report=html
Run unit tests only: pytest tests/unit/
Run specific file: pytest tests/unit/test_sample_mapping_service.py -v
"""
