# Supabase table: users
# This file documents the expected database schema
# Actual operations are handled via the credential store in app/database/credential_store.py

"""
Expected Supabase table structure:

users:
- id: uuid (primary key, default: gen_random_uuid())
- firstname: text (nullable) - null for placeholder users added by email
- lastname: text (nullable)
- email: text (unique, not null)
- password: text (nullable) - bcrypt hash, set by sign-up
- google_id: text (unique, nullable) - Google OAuth subject, set by Google sign-in
- avatar_url: text (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

A user holding neither password nor google_id is a placeholder: it was added
to a group by email and has never signed up.
"""
