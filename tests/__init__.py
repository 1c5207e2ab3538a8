"""
Tests Package - Unit tests for ResearchConnect.
===============================================

Test modules:
- test_config: Settings, utilities and logging
- test_api: Errors, tokens, session and HTTP client
- test_projects: Catalogue, filters and the project form
- test_applications: Status rules, dashboards and applicant review
- test_accounts: Account forms, login flow and profile helpers
- test_roadmap: Questionnaires, layout and roadmap service
- test_cli: Typer commands against a mocked client

Run tests with:
    pytest tests/
    pytest tests/ -v --cov=src/researchconnect
"""
