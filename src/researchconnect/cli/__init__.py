"""
CLI Module - Command-line interface for ResearchConnect.
========================================================

Provides CLI commands for:
- Registering, logging in and verifying accounts
- Browsing and filtering research projects
- Applying to projects and tracking applications
- Reviewing applicants (professors)
- Generating research and placement roadmaps

Usage:
    researchconnect --help
    researchconnect login -e ada@uni.edu
    researchconnect projects --field computer-science --search quantum
    researchconnect apply <pid>
    researchconnect roadmap placement

Components:
- main: Typer CLI application
"""

from researchconnect.cli.main import app, cli

__all__ = ["app", "cli"]
