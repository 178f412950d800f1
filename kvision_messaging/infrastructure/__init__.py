"""
Infrastructure Layer - Technical implementations of domain ports.

This layer contains:
- persistence/: conversation store adapters (Redis, Supabase REST, in-memory)
- directory/: user directory adapters (JSON file, in-memory)
"""
