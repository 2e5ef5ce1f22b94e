# Supabase tables: groups, members
# This file documents the expected database schema
# Actual operations are handled via the credential store in app/database/credential_store.py

"""
Expected Supabase table structure:

groups:
- id: uuid (primary key)
- name: text (not null)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

members:
- group_id: uuid (foreign key to groups.id, not null)
- user_id: uuid (foreign key to users.id, not null)
- created_at: timestamp (default: now())
- primary key / unique constraint on (group_id, user_id)

Group creation lives outside this service; groups are only looked up here.
"""
