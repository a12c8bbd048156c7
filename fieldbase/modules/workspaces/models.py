# Supabase tables: organizations, organization_members
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

organizations (a "workspace" in the UI):
- id: uuid (primary key)
- name: text (not null)
- slug: text (not null) - lowercase letters, digits and dashes
- description: text (nullable)
- created_by: uuid (foreign key to auth.users.id, not null)
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())
- unique constraint on (created_by, slug)

organization_members:
- id: uuid (primary key)
- organization_id: uuid (foreign key to organizations.id on delete cascade, not null)
- user_id: uuid (foreign key to auth.users.id, not null)
- role: text (not null, default: 'member') - values: owner, admin, member
- created_at: timestamp (default: now()) - joined at
- unique constraint on (organization_id, user_id)

RPC create_organization_with_owner(p_name, p_slug, p_description, p_user_id)
inserts the organization and its owner membership in one transaction and
returns the organization row.
"""
