"""
Shared Module - Common utilities, configuration, schemas, and logging.
======================================================================

This module provides foundational components used across all other modules:

- config: Configuration loading and management
- logging: Structured logging setup
- schemas: Pydantic data models mirroring the API
- utils: Utility functions (file I/O, JSON fields, formatting)
"""

from researchconnect.shared.config import Settings, get_settings
from researchconnect.shared.logging import get_logger, setup_logging
from researchconnect.shared.schemas import (
    Application,
    ApplicationStatus,
    Project,
    ProjectApplications,
    RoadmapStructure,
    StudentProfile,
    TokenClaims,
    UserType,
)
from researchconnect.shared.utils import (
    ensure_directory,
    format_date,
    load_json,
    parse_json_list,
    parse_json_object,
    save_json,
)

__all__ = [
    # Config
    "get_settings",
    "Settings",
    # Logging
    "get_logger",
    "setup_logging",
    # Schemas
    "Application",
    "ApplicationStatus",
    "Project",
    "ProjectApplications",
    "RoadmapStructure",
    "StudentProfile",
    "TokenClaims",
    "UserType",
    # Utils
    "ensure_directory",
    "format_date",
    "load_json",
    "parse_json_list",
    "parse_json_object",
    "save_json",
]
