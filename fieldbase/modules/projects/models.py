# Supabase table: projects
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- workspace_id: uuid (foreign key to organizations.id on delete cascade, not null)
- name: text (not null)
- description: text (nullable)
- color: text (default: 'blue') - palette name, see config/palette.py
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())

entity_tables.project_id references projects.id on delete cascade, so
deleting a project deletes its tables (and their fields and records).
"""
