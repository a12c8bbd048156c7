# Supabase table: entity_fields
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- table_id: uuid (foreign key to entity_tables.id on delete cascade, not null)
- name: text (not null)
- type: text (not null) - check: text, number, select, date, boolean, email,
  url, richtext, json, relation
- order_index: integer (not null, default: 0) - display order, not unique
- options: jsonb (default: '{}')
    select:   {"choices": [{"id": "s1", "label": "High", "color": "red"}, ...]}
    relation: {"target_table_id": "<uuid>"} - stored only, never resolved
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())
"""
