"""
Pydantic schema definitions for API payloads.

Each domain (boards, lists, cards, friends, etc.) defines its own
Pydantic models for request and response bodies.  Request models accept
both the snake_case column names and the camelCase keys sent by the
frontend.
"""
