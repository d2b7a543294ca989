"""MR Conflict Checker - find conflicting release->master merge requests on GitLab."""

__version__ = "0.1.0"
