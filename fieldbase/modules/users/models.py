# Supabase tables: profiles, auth.users
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py
# Authentication is handled by Supabase Auth (auth.users table)

"""
Expected Supabase table structure:

profiles:
- id: uuid (primary key, references auth.users.id on delete cascade)
- email: text - copied from auth.users by the on-signup trigger
- full_name: text (nullable) - display name, the only user-editable column
- avatar_url: text (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())
"""
