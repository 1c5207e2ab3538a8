"""
App Module - Streamlit GUI for ResearchConnect.
===============================================

Provides a web-based interface for:
- Signing up, logging in and email verification
- Browsing, filtering and applying to research projects
- Tracking applications and generating roadmaps (students)
- Posting projects and reviewing applicants (professors)

Components:
- streamlit_app: Main Streamlit application

Usage:
    Run with: streamlit run src/researchconnect/app/streamlit_app.py
    Or use: researchconnect gui
"""

# Note: Streamlit app is run directly, not imported

__all__ = []
