"""
nexus-proxy — integration test package

File: tests/integration/__init__.py
Last updated: 2026-10-19

Purpose
- Test package marker file for end-to-end proxy generation scenarios.

What should be included in this file
- Keep this file lightweight; scenarios define their own sample types.

Non-functional requirements
- Deterministic and side-effect free.
"""
