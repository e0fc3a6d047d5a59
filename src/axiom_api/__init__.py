"""aXiom API - Feedback Triage Backend.

Collects free-text feedback about aXiom's engineered cats, classifies it with
an LLM (summary, sentiment, tags, priority, next action) and serves the staff
dashboard that triages it.
"""

__version__ = "0.1.0"
