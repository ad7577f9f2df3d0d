# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the DealerAI API:
# - test_models.py, test_formatters.py, test_utils.py: Unit tests
# - test_auth.py: Token extraction, JWT checks and the session middleware
# - test_listings_api.py, test_enhancement.py, test_gallery.py, ...:
#   HTTP-contract tests with providers mocked
#
# Run tests with: pytest
# =============================================================================
