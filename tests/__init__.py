# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the yaya API:
# - test_onboarding_wizard.py / test_prompt_generator.py: Wizard and prompts
# - test_pricing.py / test_limits_service.py: Plans, Doggos, limit checks
# - test_llm_client.py: Provider routing, images and titles
# - test_services.py: Ownership checks and agent creation
# - test_auth.py / test_middleware.py: Tokens, cookies, page redirects
# - test_*_router.py, test_chat.py, test_billing.py: Endpoint contracts
#
# Run tests with: pytest
# =============================================================================
