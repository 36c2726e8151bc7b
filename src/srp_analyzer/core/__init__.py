"""
Core Package.

Contains the orchestration of the analysis:
- Analysis Engine
- Result model
- Trace logger
"""
