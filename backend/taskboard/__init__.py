"""Taskboard: task management backend with per-task authorization."""
