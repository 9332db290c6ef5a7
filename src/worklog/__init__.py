"""Worklog - a personal work-hours tracker."""

__version__ = "0.1.0"
