# Supabase table: workspace_invitations
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- organization_id: uuid (foreign key to organizations.id on delete cascade, not null)
- email: text (not null) - stored lowercase
- token: text (unique, not null)
- role: text (not null, default: 'member') - values: owner, admin, member
- created_by_user_id: uuid (foreign key to auth.users.id, not null)
- created_at: timestamp (default: now())
- expires_at: timestamp (nullable) - 7 days after creation
- accepted_at: timestamp (nullable)
- accepted_by_user_id: uuid (nullable, foreign key to auth.users.id)

An invitation is pending while accepted_at is null and expires_at is null or
in the future.

RPC accept_workspace_invitation(p_token, p_user_id) marks the invitation
accepted (only while accepted_at is null) and inserts the membership with the
invitation's role in one transaction; it returns the membership row and raises
P0002 when there is no pending invitation for the token.
"""
