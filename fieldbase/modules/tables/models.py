# Supabase table: entity_tables
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- workspace_id: uuid (foreign key to organizations.id on delete cascade, not null)
- project_id: uuid (foreign key to projects.id on delete cascade, nullable) -
  null for tables that belong to no project
- name: text (not null)
- description: text (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())

Fields (entity_fields) and records (entity_records) cascade with their table.
"""
