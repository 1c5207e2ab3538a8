"""
ResearchConnect - Client for the student/professor research collaboration platform
==================================================================================

Connects students looking for research experience with professors posting
research opportunities. This package is the client side of the platform:

- api: typed REST client, bearer-token session handling and error mapping
- projects: project filtering/search and the project form
- applications: application tracking for students and professors
- accounts: registration, login, verification and profile forms
- roadmap: research/placement questionnaire wizards and roadmap rendering
- app: multi-role Streamlit web UI
- cli: Typer command-line interface

The API server, its database and the roadmap generator are external
services reached through the API client.
"""

__version__ = "0.1.0"
__author__ = "ResearchConnect Team"
__license__ = "MIT"

# Public API - lazy imports to avoid circular dependencies and speed up startup
__all__ = [
    # Version info
    "__version__",
    "__author__",
    "__license__",
    # Main modules (imported on demand)
    "shared",
    "api",
    "projects",
    "applications",
    "accounts",
    "roadmap",
    "app",
    "cli",
]
