"""
PORTS - Interfaces that infrastructure implements

- repositories/conversation_store.py → fetch-all / upsert conversation records
- repositories/user_directory.py     → read-only list of users
"""
