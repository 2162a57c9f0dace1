"""
Application Layer

Contains the use cases and application services that orchestrate domain
objects and infrastructure adapters.

Structure:
- services/: Playback controller, catalog and library services
- interfaces/: Port interfaces for infrastructure adapters
"""
