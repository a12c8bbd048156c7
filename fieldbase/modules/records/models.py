# Supabase table: entity_records
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- table_id: uuid (foreign key to entity_tables.id on delete cascade, not null)
- data: jsonb (not null, default: '{}') - {"<entity_fields.id>": value, ...}
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())

data is not checked against the table's fields: keys may name deleted
fields and values are stored as sent. The fields describe how to render
a record, they do not constrain what is stored.
"""
